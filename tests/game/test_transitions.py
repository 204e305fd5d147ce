"""
Tests for StateTransitionEngine: dealing, playing and resolving tricks.
"""

import random

import pytest

from mendikot.common.card import Card, Suit
from mendikot.events import EventBus, EngineEventType
from mendikot.game.rules import determine_round_winner
from mendikot.game.state import (
    CompletedTrick,
    GamePhase,
    MendikotRules,
    PlayedCard,
    RejectionReason,
    Team,
    all_cards_accounted,
)
from mendikot.game.transitions import StateTransitionEngine

c = Card.from_id


@pytest.fixture
def events():
    """Record every event emitted on the bus."""
    recorded = []
    EventBus.get_instance().on_any(recorded.append)
    return recorded


def event_names(events):
    return [name for name, _ in events]


class TestCreateRound:
    def test_deals_thirteen_cards_each(self):
        state = StateTransitionEngine.create_round(rng=random.Random(1))
        assert state.phase == GamePhase.PLAYING
        assert [p.card_count for p in state.players] == [13] * 4
        assert all_cards_accounted(state)

    def test_seat_after_dealer_leads(self):
        state = StateTransitionEngine.create_round(rng=random.Random(1))
        assert state.current_player_index == 1
        assert state.message == "Game started! Play a card."

        state = StateTransitionEngine.create_round(
            MendikotRules(dealer_index=3), rng=random.Random(1)
        )
        assert state.current_player_index == 0

    def test_teams_and_humans(self):
        state = StateTransitionEngine.create_round(
            MendikotRules(human_seats=(0, 2)), rng=random.Random(1)
        )
        assert [p.team for p in state.players] == [Team.A, Team.B, Team.A, Team.B]
        assert [p.is_human for p in state.players] == [True, False, True, False]

    def test_initial_scores_are_zero(self):
        state = StateTransitionEngine.create_round(rng=random.Random(1))
        assert state.trump_suit is None
        assert not state.trump_revealed
        assert state.completed_tricks == ()
        assert (state.team_a_tens, state.team_b_tens, state.pot_tens) == (0, 0, 0)
        assert state.winner is None

    def test_same_seed_same_deal(self):
        first = StateTransitionEngine.create_round(rng=random.Random(9))
        second = StateTransitionEngine.create_round(rng=random.Random(9))
        assert [p.hand for p in first.players] == [p.hand for p in second.players]
        assert first.id != second.id

    def test_stacked_deck(self, suit_per_seat_deck):
        state = StateTransitionEngine.create_round(deck=suit_per_seat_deck)
        assert {card.suit for card in state.players[1].hand} == {Suit.HEARTS}

    def test_bad_table_setup_raises(self):
        with pytest.raises(ValueError):
            MendikotRules(player_names=("a", "b", "c"))
        with pytest.raises(ValueError):
            MendikotRules(dealer_index=4)

    def test_emits_round_events(self, events):
        StateTransitionEngine.create_round(rng=random.Random(1))
        names = event_names(events)
        assert names[0] == "GAME_CREATED"
        assert names.count("CARD_DEALT") == 4
        assert names[-1] == "ROUND_STARTED"


class TestRejections:
    @pytest.fixture
    def state(self, make_state):
        return make_state(
            [["3-hearts"], ["K-hearts", "9-spades"], ["5-diamonds"], ["7-hearts"]],
            current=1,
        )

    @pytest.mark.parametrize(
        "seat, card_id, reason",
        [
            (0, "3-hearts", RejectionReason.WRONG_TURN),
            (4, "K-hearts", RejectionReason.INVALID_SEAT),
            (-1, "K-hearts", RejectionReason.INVALID_SEAT),
            (True, "K-hearts", RejectionReason.INVALID_SEAT),
            (1, "A-hearts", RejectionReason.CARD_NOT_IN_HAND),
        ],
    )
    def test_rejected_play_leaves_state_unchanged(self, state, seat, card_id, reason):
        result = StateTransitionEngine.apply_play(state, seat, c(card_id))
        assert not result
        assert result.reason == reason
        assert result.state is state

    def test_must_follow_suit(self, make_state):
        state = make_state(
            [["3-hearts"], ["K-hearts"], ["5-diamonds"], ["7-hearts", "A-spades"]],
            current=3,
            trick=[(1, "K-hearts"), (2, "5-diamonds")],
        )
        result = StateTransitionEngine.apply_play(state, 3, c("A-spades"))
        assert result.reason == RejectionReason.MUST_FOLLOW_SUIT
        assert "hearts" in result.message
        assert result.state is state

    def test_no_plays_after_round_end(self, make_state):
        from dataclasses import replace

        state = replace(make_state([["3-hearts"], [], [], []]), phase=GamePhase.ROUND_END)
        result = StateTransitionEngine.apply_play(state, 0, c("3-hearts"))
        assert result.reason == RejectionReason.WRONG_PHASE

    def test_rejection_emits_event(self, state, events):
        StateTransitionEngine.apply_play(state, 0, c("3-hearts"))
        (name, data), = events
        assert name == "PLAY_REJECTED"
        assert data["reason"] == "WRONG_TURN"
        assert data["seat"] == 0

    def test_validate_play_matches_apply_play(self, state):
        assert StateTransitionEngine.validate_play(state, 1, c("K-hearts")) is None
        assert (
            StateTransitionEngine.validate_play(state, 0, c("3-hearts"))
            == RejectionReason.WRONG_TURN
        )


class TestPlays:
    def test_accepted_play_moves_card_and_turn(self, make_state):
        state = make_state(
            [["3-hearts"], ["K-hearts", "9-spades"], ["5-diamonds"], ["7-hearts"]],
            current=1,
        )
        result = StateTransitionEngine.apply_play(state, 1, c("K-hearts"))
        assert result
        new = result.state
        assert new.players[1].hand == (c("9-spades"),)
        assert new.trick.plays == (PlayedCard(1, c("K-hearts")),)
        assert new.trick.lead_suit == Suit.HEARTS
        assert new.current_player_index == 2
        assert new.message == "Partner's turn"
        # The original is untouched
        assert state.players[1].card_count == 2
        assert state.trick.is_empty

    def test_off_suit_play_reveals_trump(self, make_state, events):
        state = make_state(
            [["3-hearts"], ["9-spades"], ["5-diamonds", "A-clubs"], ["7-hearts"]],
            current=2,
            trick=[(1, "K-hearts")],
        )
        result = StateTransitionEngine.apply_play(state, 2, c("5-diamonds"))
        new = result.state
        assert result.trump_revealed
        assert new.trump_suit == Suit.DIAMONDS
        assert new.trump_revealed
        assert new.trump_setter_index == 2
        assert new.message == "Trump is now diamonds! East's turn"
        assert "TRUMP_REVEALED" in event_names(events)

    def test_trump_is_set_only_once(self, make_state):
        state = make_state(
            [["3-hearts"], ["9-spades"], ["5-diamonds"], ["8-clubs"]],
            current=3,
            trick=[(1, "K-hearts"), (2, "5-diamonds")],
            trump=Suit.DIAMONDS,
            setter=2,
        )
        result = StateTransitionEngine.apply_play(state, 3, c("8-clubs"))
        assert not result.trump_revealed
        assert result.state.trump_suit == Suit.DIAMONDS
        assert result.state.trump_setter_index == 2

    def test_revealing_card_wins_its_own_trick(self, make_state):
        state = make_state(
            [["3-hearts", "2-clubs"], ["9-spades"], ["5-diamonds", "A-clubs"], ["7-hearts", "8-clubs"]],
            current=2,
            trick=[(1, "K-hearts")],
        )
        for seat, card_id in [(2, "5-diamonds"), (3, "7-hearts"), (0, "3-hearts")]:
            result = StateTransitionEngine.apply_play(state, seat, c(card_id))
            state = result.state
        assert result.completed_trick.winner_id == 2
        assert state.current_player_index == 2
        assert state.team_a_tricks_won == 1

    def test_revealing_card_can_be_over_trumped(self, make_state):
        state = make_state(
            [["3-hearts", "2-clubs"], ["9-spades"], ["5-diamonds", "A-clubs"], ["9-diamonds", "8-clubs"]],
            current=2,
            trick=[(1, "K-hearts")],
        )
        for seat, card_id in [(2, "5-diamonds"), (3, "9-diamonds"), (0, "3-hearts")]:
            result = StateTransitionEngine.apply_play(state, seat, c(card_id))
            state = result.state
        assert result.completed_trick.winner_id == 3
        assert state.team_b_tricks_won == 1
        assert state.trump_setter_index == 2

    def test_completed_trick_with_tens_goes_to_pot(self, make_state, events):
        state = make_state(
            [["10-spades", "2-clubs"], ["3-spades", "4-clubs"], ["A-spades", "5-clubs"], ["10-hearts"]],
            current=0,
            trump=Suit.CLUBS,
            setter=1,
        )
        for seat, card_id in [(0, "10-spades"), (1, "3-spades"), (2, "A-spades"), (3, "10-hearts")]:
            result = StateTransitionEngine.apply_play(state, seat, c(card_id))
            state = result.state
        assert result.completed_trick.tens == 2
        assert (state.pot_tens, state.pot_tens_team) == (2, Team.A)
        assert state.trick.is_empty
        assert state.phase == GamePhase.PLAYING
        assert state.message == "Partner wins the trick! (2 tens in pot)"
        assert "TRICK_COMPLETED" in event_names(events)

    def test_pot_confirmation_message(self, make_state, events):
        state = make_state(
            [["2-spades"], ["3-spades"], ["A-spades"], ["4-spades"]],
            current=0,
            pot_tens=1,
            pot_tens_team=Team.A,
        )
        for seat, card_id in [(0, "2-spades"), (1, "3-spades"), (2, "A-spades"), (3, "4-spades")]:
            result = StateTransitionEngine.apply_play(state, seat, c(card_id))
            state = result.state
        assert state.team_a_tens == 1
        assert state.pot_tens == 0
        assert result.tens_confirmed == 1
        assert state.message == "Partner wins the trick! (1 ten confirmed!)"
        assert "TENS_CONFIRMED" in event_names(events)

    def test_final_trick_forced_settlement(self, make_state, events):
        filler = tuple(PlayedCard(seat, c("2-hearts")) for seat in range(4))
        history = tuple(CompletedTrick(winner_id=seat % 2, plays=filler) for seat in range(12))
        state = make_state(
            [["A-spades"], ["2-spades"], ["3-spades"], ["4-spades"]],
            current=0,
            completed_tricks=history,
            team_a_tricks_won=6,
            team_b_tricks_won=6,
            team_a_tens=2,
            team_b_tens=1,
            pot_tens=1,
            pot_tens_team=Team.B,
        )
        for seat, card_id in [(0, "A-spades"), (1, "2-spades"), (2, "3-spades"), (3, "4-spades")]:
            result = StateTransitionEngine.apply_play(state, seat, c(card_id))
            state = result.state

        assert state.phase == GamePhase.ROUND_END
        assert (state.team_a_tens, state.team_b_tens, state.pot_tens) == (3, 1, 0)
        assert state.pot_tens_team is None
        assert state.winner is Team.A
        assert not state.is_mendikot
        assert state.message == "Team A wins!"
        assert event_names(events)[-1] == "ROUND_ENDED"


class TestFullRound:
    def test_suit_per_seat_deck_is_mendikot_whitewash(self, suit_per_seat_deck, first_legal):
        state = StateTransitionEngine.create_round(deck=suit_per_seat_deck)
        final = first_legal(state)[-1]

        assert final.trump_suit == Suit.DIAMONDS
        assert final.trump_setter_index == 2
        assert final.team_a_tricks_won == 13
        assert final.team_a_tens == 4
        assert final.winner is Team.A
        assert final.is_mendikot
        assert final.is_whitewash
        assert final.message == "Team A wins with Mendikot! Whitewash!"

    @pytest.mark.parametrize("seed", [0, 1, 2, 3, 4, 5, 6, 7])
    def test_random_round_invariants(self, seed, first_legal):
        state = StateTransitionEngine.create_round(
            MendikotRules(dealer_index=seed % 4), rng=random.Random(seed)
        )
        states = first_legal(state)
        final = states[-1]

        # Every card is somewhere at every step
        assert all(all_cards_accounted(s) for s in states)

        # Trump is set at most once and never changes afterwards
        trumps = [s.trump_suit for s in states if s.trump_revealed]
        assert len(set(trumps)) <= 1
        revealed = [s.trump_revealed for s in states]
        assert revealed == sorted(revealed)

        assert final.phase == GamePhase.ROUND_END
        assert len(final.completed_tricks) == 13
        assert final.team_a_tricks_won + final.team_b_tricks_won == 13
        assert final.team_a_tens + final.team_b_tens == 4
        assert final.pot_tens == 0
        assert all(p.card_count == 0 for p in final.players)

        outcome = determine_round_winner(
            final.team_a_tens,
            final.team_b_tens,
            final.team_a_tricks_won,
            final.team_b_tricks_won,
        )
        assert final.winner is outcome.winner
        assert final.is_mendikot == outcome.is_mendikot

        result = StateTransitionEngine.apply_play(final, 0, c("2-hearts"))
        assert result.reason == RejectionReason.WRONG_PHASE

    def test_legal_cards_for_other_seat_is_empty(self):
        state = StateTransitionEngine.create_round(rng=random.Random(3))
        assert StateTransitionEngine.legal_cards_for(state, 0) == []
        assert len(StateTransitionEngine.legal_cards_for(state, 1)) == 13
