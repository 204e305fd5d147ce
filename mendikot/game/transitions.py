"""
State transition functions for Mendikot.

This module provides pure functions for transitioning between round states,
without modifying the original state objects. ``apply_play`` is the only way
a round advances once the cards are dealt.
"""

import logging
import random
from dataclasses import replace
from typing import List, Optional, Sequence

from mendikot.common.card import Card
from mendikot.common.deck import Deck, deal
from mendikot.events import EventBus, EngineEventType
from mendikot.game.constants import NUM_SEATS, TRICK_SIZE, TRICKS_PER_ROUND
from mendikot.game.rules import (
    count_tens,
    determine_round_winner,
    legal_cards,
    play_rejection,
    reveals_trump,
    settle_tens_pot,
    winning_play,
)
from mendikot.game.state import (
    CompletedTrick,
    GamePhase,
    GameState,
    MendikotRules,
    PlayedCard,
    PlayerState,
    PlayResult,
    RejectionReason,
    Team,
    TrickState,
)

logger = logging.getLogger("mendikot.transitions")

_REJECTION_MESSAGES = {
    RejectionReason.WRONG_PHASE: "No plays are accepted in the {phase} phase",
    RejectionReason.WRONG_TURN: "It is not seat {seat}'s turn",
    RejectionReason.INVALID_SEAT: "Seat {seat} is not at this table",
    RejectionReason.CARD_NOT_IN_HAND: "{card} is not in seat {seat}'s hand",
    RejectionReason.MUST_FOLLOW_SUIT: "Seat {seat} must follow {lead}",
}


def _plural_tens(count: int) -> str:
    return f"{count} ten{'s' if count > 1 else ''}"


class StateTransitionEngine:
    """
    Pure functions for state transitions in Mendikot.

    This class contains static methods that implement round state transitions.
    Each method takes a state and returns a new state, without modifying the
    original.
    """

    @staticmethod
    def create_round(
        rules: Optional[MendikotRules] = None,
        rng: Optional[random.Random] = None,
        deck: Optional[Sequence[Card]] = None,
    ) -> GameState:
        """
        Seat four players and deal a fresh round.

        Args:
            rules: Table setup (names, human seats, dealer)
            rng: Random source for the shuffle
            deck: A pre-arranged 52-card deck to deal instead of shuffling

        Returns:
            A round in the PLAYING phase

        Raises:
            DealError: If the names or the deck have the wrong size
        """
        rules = rules or MendikotRules()
        players = tuple(
            PlayerState(
                id=seat,
                name=name,
                team=Team.for_seat(seat),
                is_human=seat in rules.human_seats,
            )
            for seat, name in enumerate(rules.player_names)
        )
        state = GameState(
            players=players,
            phase=GamePhase.DEALING,
            dealer_index=rules.dealer_index,
            message="Dealing...",
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.GAME_CREATED,
            {
                "game_id": state.id,
                "players": [p.name for p in players],
                "dealer_index": rules.dealer_index,
                "timestamp": state.timestamp,
            },
        )

        if deck is None:
            deck = Deck().shuffle(rng).cards
        return StateTransitionEngine.deal_cards(state, deck)

    @staticmethod
    def deal_cards(state: GameState, deck: Sequence[Card]) -> GameState:
        """
        Deal a 52-card deck to the four seats and open play.

        Args:
            state: A round in the DEALING phase
            deck: The shuffled deck

        Returns:
            New round state in the PLAYING phase, the seat after the dealer to lead
        """
        if state.phase != GamePhase.DEALING:
            return state  # Already dealt

        hands = deal(state.players, deck)
        new_players = tuple(
            replace(player, hand=hand) for player, hand in zip(state.players, hands)
        )
        first_seat = (state.dealer_index + 1) % NUM_SEATS

        new_state = replace(
            state,
            players=new_players,
            phase=GamePhase.PLAYING,
            current_player_index=first_seat,
            message="Game started! Play a card.",
        )

        event_bus = EventBus.get_instance()
        for player in new_players:
            event_bus.emit(
                EngineEventType.CARD_DEALT,
                {
                    "game_id": new_state.id,
                    "seat": player.id,
                    "player_name": player.name,
                    "card_count": player.card_count,
                },
            )
        event_bus.emit(
            EngineEventType.ROUND_STARTED,
            {
                "game_id": new_state.id,
                "dealer_index": new_state.dealer_index,
                "first_player": new_players[first_seat].name,
                "timestamp": new_state.timestamp,
            },
        )
        logger.debug("Round %s dealt, seat %d leads", new_state.id, first_seat)

        return new_state

    @staticmethod
    def validate_play(
        state: GameState, seat_id: int, card: Card
    ) -> Optional[RejectionReason]:
        """
        Check a proposed play without applying it.

        Returns:
            None if ``apply_play`` would accept the play, otherwise the reason
        """
        if state.phase != GamePhase.PLAYING:
            return RejectionReason.WRONG_PHASE
        if (
            isinstance(seat_id, bool)
            or not isinstance(seat_id, int)
            or not 0 <= seat_id < len(state.players)
        ):
            return RejectionReason.INVALID_SEAT
        if seat_id != state.current_player_index:
            return RejectionReason.WRONG_TURN
        return play_rejection(card, state.players[seat_id].hand, state.trick)

    @staticmethod
    def legal_cards_for(state: GameState, seat_id: int) -> List[Card]:
        """Cards the seat may play now; empty when it is not the seat's turn."""
        if (
            state.phase != GamePhase.PLAYING
            or isinstance(seat_id, bool)
            or seat_id != state.current_player_index
        ):
            return []
        return legal_cards(state.players[seat_id].hand, state.trick)

    @staticmethod
    def apply_play(state: GameState, seat_id: int, card: Card) -> PlayResult:
        """
        Play a card.

        The play is validated first; a refused play returns the original
        state untouched. An accepted play may cut trump, close the trick,
        move tens through the pot and end the round.

        Args:
            state: Current round state
            seat_id: Seat proposing the play
            card: Card to play

        Returns:
            The outcome, carrying the new state when accepted
        """
        reason = StateTransitionEngine.validate_play(state, seat_id, card)
        if reason is not None:
            return StateTransitionEngine._reject(state, seat_id, card, reason)

        player = state.players[seat_id]
        event_bus = EventBus.get_instance()

        # Cut hukum: a player void in the lead suit sets trump with this card
        cuts_trump = reveals_trump(player.hand, state.trick, state.trump_revealed)
        trump_suit = card.suit if cuts_trump else state.trump_suit
        trump_setter_index = seat_id if cuts_trump else state.trump_setter_index

        new_player = replace(player, hand=tuple(c for c in player.hand if c != card))
        new_players = list(state.players)
        new_players[seat_id] = new_player
        new_trick = TrickState(
            plays=state.trick.plays + (PlayedCard(seat_id, card),),
            lead_suit=state.trick.lead_suit or card.suit,
        )

        new_state = replace(
            state,
            players=tuple(new_players),
            trick=new_trick,
            trump_suit=trump_suit,
            trump_revealed=state.trump_revealed or cuts_trump,
            trump_setter_index=trump_setter_index,
        )

        event_bus.emit(
            EngineEventType.CARD_PLAYED,
            {
                "game_id": state.id,
                "seat": seat_id,
                "player_name": player.name,
                "card": card.id,
                "lead_suit": new_trick.lead_suit.value,
                "remaining_hand_size": new_player.card_count,
            },
        )
        logger.debug("Seat %d played %s", seat_id, card)

        if cuts_trump:
            event_bus.emit(
                EngineEventType.TRUMP_REVEALED,
                {
                    "game_id": state.id,
                    "trump_suit": trump_suit.value,
                    "setter_seat": seat_id,
                    "setter_name": player.name,
                },
            )
            logger.info("%s cut trump: %s", player.name, trump_suit.value)

        if len(new_trick.plays) < TRICK_SIZE:
            next_seat = (seat_id + 1) % NUM_SEATS
            message = f"{new_players[next_seat].name}'s turn"
            if cuts_trump:
                message = f"Trump is now {trump_suit.value}! {message}"
            new_state = replace(
                new_state,
                current_player_index=next_seat,
                phase=GamePhase.PLAYING,
                message=message,
            )
            return PlayResult(
                accepted=True,
                state=new_state,
                message=message,
                trump_revealed=cuts_trump,
            )

        return StateTransitionEngine._complete_trick(new_state, cuts_trump)

    @staticmethod
    def _complete_trick(state: GameState, cuts_trump: bool) -> PlayResult:
        """
        Resolve a full trick, settle the tens pot and, after the last trick,
        classify the round.
        """
        trick = state.trick
        winner = winning_play(
            trick.plays, trick.lead_suit, state.trump_suit, state.trump_revealed
        )
        winner_player = state.players[winner.seat]
        winner_team = winner_player.team
        completed = CompletedTrick(winner_id=winner.seat, plays=trick.plays)
        completed_tricks = state.completed_tricks + (completed,)
        is_final = len(completed_tricks) == TRICKS_PER_ROUND

        settlement = settle_tens_pot(
            team_a_tens=state.team_a_tens,
            team_b_tens=state.team_b_tens,
            pot_tens=state.pot_tens,
            pot_tens_team=state.pot_tens_team,
            winner_team=winner_team,
            tens_in_trick=count_tens(completed.cards),
            is_final_trick=is_final,
        )

        new_state = replace(
            state,
            trick=TrickState(),
            completed_tricks=completed_tricks,
            team_a_tricks_won=state.team_a_tricks_won + (winner_team is Team.A),
            team_b_tricks_won=state.team_b_tricks_won + (winner_team is Team.B),
            team_a_tens=settlement.team_a_tens,
            team_b_tens=settlement.team_b_tens,
            pot_tens=settlement.pot_tens,
            pot_tens_team=settlement.pot_tens_team,
            last_trick_winner=winner_team,
            current_player_index=winner.seat,
        )

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.TRICK_COMPLETED,
            {
                "game_id": state.id,
                "trick_number": len(completed_tricks),
                "winner_seat": winner.seat,
                "winner_name": winner_player.name,
                "winner_team": winner_team.value,
                "cards": [play.card.id for play in trick.plays],
                "tens": completed.tens,
                "pot_tens": settlement.pot_tens,
            },
        )
        tens_confirmed = settlement.confirmed + settlement.forced
        if tens_confirmed:
            event_bus.emit(
                EngineEventType.TENS_CONFIRMED,
                {
                    "game_id": state.id,
                    "team": winner_team.value,
                    "tens": tens_confirmed,
                    "forced": settlement.forced > 0,
                },
            )
        logger.debug(
            "Trick %d to seat %d (team %s), pot=%d",
            len(completed_tricks),
            winner.seat,
            winner_team.value,
            settlement.pot_tens,
        )

        if is_final:
            outcome = determine_round_winner(
                new_state.team_a_tens,
                new_state.team_b_tens,
                new_state.team_a_tricks_won,
                new_state.team_b_tricks_won,
            )
            suffix = (" with Mendikot!" if outcome.is_mendikot else "") + (
                " Whitewash!" if outcome.is_whitewash else ""
            )
            message = f"Team {outcome.winner.value} wins{suffix or '!'}"
            new_state = replace(
                new_state,
                phase=GamePhase.ROUND_END,
                winner=outcome.winner,
                is_mendikot=outcome.is_mendikot,
                is_whitewash=outcome.is_whitewash,
                message=message,
            )
            event_bus.emit(
                EngineEventType.ROUND_ENDED,
                {
                    "game_id": state.id,
                    "winner": outcome.winner.value,
                    "is_mendikot": outcome.is_mendikot,
                    "is_whitewash": outcome.is_whitewash,
                    "team_a_tens": new_state.team_a_tens,
                    "team_b_tens": new_state.team_b_tens,
                    "team_a_tricks": new_state.team_a_tricks_won,
                    "team_b_tricks": new_state.team_b_tricks_won,
                },
            )
            logger.info("Round %s over: %s", state.id, message)
        else:
            message = f"{winner_player.name} wins the trick!"
            if settlement.confirmed:
                message += f" ({_plural_tens(settlement.confirmed)} confirmed!)"
            if settlement.pot_tens:
                message += f" ({_plural_tens(settlement.pot_tens)} in pot)"
            new_state = replace(new_state, phase=GamePhase.PLAYING, message=message)

        if cuts_trump:
            message = f"Trump is now {state.trump_suit.value}! {message}"
            new_state = replace(new_state, message=message)

        return PlayResult(
            accepted=True,
            state=new_state,
            message=message,
            completed_trick=completed,
            trump_revealed=cuts_trump,
            tens_confirmed=tens_confirmed,
        )

    @staticmethod
    def _reject(
        state: GameState, seat_id: int, card: Card, reason: RejectionReason
    ) -> PlayResult:
        lead = state.trick.lead_suit.value if state.trick.lead_suit else None
        message = _REJECTION_MESSAGES[reason].format(
            phase=state.phase.name, seat=seat_id, card=card, lead=lead
        )
        logger.warning("Rejected play of %s by seat %s: %s", card, seat_id, message)

        event_bus = EventBus.get_instance()
        event_bus.emit(
            EngineEventType.PLAY_REJECTED,
            {
                "game_id": state.id,
                "seat": seat_id,
                "card": card.id if isinstance(card, Card) else repr(card),
                "reason": reason.name,
                "message": message,
            },
        )
        return PlayResult(accepted=False, state=state, reason=reason, message=message)
