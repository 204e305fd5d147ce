"""
Strict serialization of round state.

Round state leaves the engine whenever a session store persists it or a
server broadcasts it. ``state_to_dict`` writes every field; ``state_from_dict``
reads it back and validates types, enumerations, nullability, seat ranges and
the round invariants, so a corrupted or forged document is refused before it
reaches :class:`~mendikot.game.transitions.StateTransitionEngine`.
"""

import json
from typing import Any, Dict, List, Optional, Tuple, Type

from mendikot.common.card import Card, Suit
from mendikot.game.constants import (
    NUM_SEATS,
    TENS_PER_DECK,
    TRICK_SIZE,
    TRICKS_PER_ROUND,
)
from mendikot.game.rules import determine_round_winner
from mendikot.game.state import (
    CompletedTrick,
    GamePhase,
    GameState,
    PlayedCard,
    PlayerState,
    Team,
    TrickState,
    all_cards_accounted,
)

SCHEMA_VERSION = 1


class SchemaError(ValueError):
    """Raised when a serialized round state is malformed or inconsistent."""


def _card_list(cards) -> List[str]:
    return [card.id for card in cards]


def _plays_to_list(plays) -> List[Dict[str, Any]]:
    return [{"seat": play.seat, "card": play.card.id} for play in plays]


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """
    Convert a round state to a JSON-compatible dictionary.

    Args:
        state: Round state to serialize

    Returns:
        Dictionary holding every field of the state
    """
    return {
        "schema_version": SCHEMA_VERSION,
        "id": state.id,
        "phase": state.phase.name,
        "current_player_index": state.current_player_index,
        "dealer_index": state.dealer_index,
        "trump_suit": state.trump_suit.value if state.trump_suit else None,
        "trump_revealed": state.trump_revealed,
        "trump_setter_index": state.trump_setter_index,
        "trick": {
            "plays": _plays_to_list(state.trick.plays),
            "lead_suit": state.trick.lead_suit.value if state.trick.lead_suit else None,
            "winner_id": state.trick.winner_id,
        },
        "completed_tricks": [
            {"winner_id": trick.winner_id, "plays": _plays_to_list(trick.plays)}
            for trick in state.completed_tricks
        ],
        "team_a_tricks_won": state.team_a_tricks_won,
        "team_b_tricks_won": state.team_b_tricks_won,
        "team_a_tens": state.team_a_tens,
        "team_b_tens": state.team_b_tens,
        "pot_tens": state.pot_tens,
        "pot_tens_team": state.pot_tens_team.value if state.pot_tens_team else None,
        "last_trick_winner": (
            state.last_trick_winner.value if state.last_trick_winner else None
        ),
        "message": state.message,
        "winner": state.winner.value if state.winner else None,
        "is_mendikot": state.is_mendikot,
        "is_whitewash": state.is_whitewash,
        "timestamp": state.timestamp,
        "players": [
            {
                "id": player.id,
                "name": player.name,
                "team": player.team.value,
                "is_human": player.is_human,
                "hand": _card_list(player.hand),
            }
            for player in state.players
        ],
    }


# Field readers


def _field(data: Dict[str, Any], key: str, kind: Type, nullable: bool = False):
    if not isinstance(data, dict):
        raise SchemaError(f"Expected an object while reading {key!r}")
    if key not in data:
        raise SchemaError(f"Missing field {key!r}")
    value = data[key]
    if value is None:
        if nullable:
            return None
        raise SchemaError(f"Field {key!r} may not be null")
    # bool is an int subclass; keep the two apart
    if kind is int and isinstance(value, bool):
        raise SchemaError(f"Field {key!r} must be an integer, got a boolean")
    if kind is float and isinstance(value, int) and not isinstance(value, bool):
        value = float(value)
    if not isinstance(value, kind):
        raise SchemaError(
            f"Field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def _count(data: Dict[str, Any], key: str, upper: int) -> int:
    value = _field(data, key, int)
    if not 0 <= value <= upper:
        raise SchemaError(f"Field {key!r} out of range: {value}")
    return value


def _seat(data: Dict[str, Any], key: str, nullable: bool = False) -> Optional[int]:
    value = _field(data, key, int, nullable)
    if value is not None and not 0 <= value < NUM_SEATS:
        raise SchemaError(f"Field {key!r} is not a seat: {value}")
    return value


def _suit(data: Dict[str, Any], key: str) -> Optional[Suit]:
    value = _field(data, key, str, nullable=True)
    if value is None:
        return None
    try:
        return Suit(value)
    except ValueError:
        raise SchemaError(f"Field {key!r} is not a suit: {value!r}") from None


def _team(data: Dict[str, Any], key: str, nullable: bool = True) -> Optional[Team]:
    value = _field(data, key, str, nullable)
    if value is None:
        return None
    try:
        return Team(value)
    except ValueError:
        raise SchemaError(f"Field {key!r} is not a team: {value!r}") from None


def _card(value: Any) -> Card:
    try:
        return Card.from_id(value)
    except ValueError as e:
        raise SchemaError(str(e)) from None


def _plays(data: Dict[str, Any], key: str) -> Tuple[PlayedCard, ...]:
    raw = _field(data, key, list)
    return tuple(
        PlayedCard(_seat(item, "seat"), _card(_field(item, "card", str)))
        for item in raw
    )


def _player(data: Dict[str, Any], seat: int) -> PlayerState:
    player_id = _seat(data, "id")
    if player_id != seat:
        raise SchemaError(f"Player at position {seat} has id {player_id}")
    team = _team(data, "team", nullable=False)
    if team is not Team.for_seat(seat):
        raise SchemaError(f"Seat {seat} cannot be on team {team.value}")
    return PlayerState(
        id=player_id,
        name=_field(data, "name", str),
        team=team,
        is_human=_field(data, "is_human", bool),
        hand=tuple(_card(card_id) for card_id in _field(data, "hand", list)),
    )


def _phase(data: Dict[str, Any]) -> GamePhase:
    name = _field(data, "phase", str)
    try:
        phase = GamePhase[name]
    except KeyError:
        raise SchemaError(f"Unknown phase {name!r}") from None
    if phase == GamePhase.TRICK_END:
        raise SchemaError("TRICK_END is transient and cannot be stored")
    return phase


def state_from_dict(data: Dict[str, Any]) -> GameState:
    """
    Rebuild and validate a round state.

    Args:
        data: Dictionary produced by :func:`state_to_dict`

    Returns:
        The round state

    Raises:
        SchemaError: If a field is missing, mistyped or the state is inconsistent
    """
    version = _field(data, "schema_version", int)
    if version != SCHEMA_VERSION:
        raise SchemaError(f"Unsupported schema version {version}")

    raw_players = _field(data, "players", list)
    if len(raw_players) != NUM_SEATS:
        raise SchemaError(f"Expected {NUM_SEATS} players, got {len(raw_players)}")
    players = tuple(_player(raw, seat) for seat, raw in enumerate(raw_players))

    raw_trick = _field(data, "trick", dict)
    trick = TrickState(
        plays=_plays(raw_trick, "plays"),
        lead_suit=_suit(raw_trick, "lead_suit"),
        winner_id=_seat(raw_trick, "winner_id", nullable=True),
    )

    completed = []
    for raw in _field(data, "completed_tricks", list):
        plays = _plays(raw, "plays")
        winner_id = _seat(raw, "winner_id")
        if len(plays) != TRICK_SIZE:
            raise SchemaError(f"Completed trick holds {len(plays)} cards")
        if winner_id not in {play.seat for play in plays}:
            raise SchemaError(f"Trick winner {winner_id} did not play in the trick")
        completed.append(CompletedTrick(winner_id=winner_id, plays=plays))

    state = GameState(
        id=_field(data, "id", str),
        players=players,
        phase=_phase(data),
        current_player_index=_seat(data, "current_player_index"),
        dealer_index=_seat(data, "dealer_index"),
        trump_suit=_suit(data, "trump_suit"),
        trump_revealed=_field(data, "trump_revealed", bool),
        trump_setter_index=_seat(data, "trump_setter_index", nullable=True),
        trick=trick,
        completed_tricks=tuple(completed),
        team_a_tricks_won=_count(data, "team_a_tricks_won", TRICKS_PER_ROUND),
        team_b_tricks_won=_count(data, "team_b_tricks_won", TRICKS_PER_ROUND),
        team_a_tens=_count(data, "team_a_tens", TENS_PER_DECK),
        team_b_tens=_count(data, "team_b_tens", TENS_PER_DECK),
        pot_tens=_count(data, "pot_tens", TENS_PER_DECK),
        pot_tens_team=_team(data, "pot_tens_team"),
        last_trick_winner=_team(data, "last_trick_winner"),
        message=_field(data, "message", str),
        winner=_team(data, "winner"),
        is_mendikot=_field(data, "is_mendikot", bool),
        is_whitewash=_field(data, "is_whitewash", bool),
        timestamp=_field(data, "timestamp", float),
    )
    validate_state(state)
    return state


def validate_state(state: GameState) -> None:
    """
    Check the round invariants.

    Raises:
        SchemaError: On the first invariant that does not hold
    """
    if state.trump_revealed != (state.trump_suit is not None):
        raise SchemaError("trump_suit must be set exactly when trump is revealed")
    if state.trump_revealed != (state.trump_setter_index is not None):
        raise SchemaError(
            "trump_setter_index must be set exactly when trump is revealed"
        )

    if len(state.trick.plays) >= TRICK_SIZE:
        raise SchemaError("The current trick cannot hold a full set of cards")
    if state.trick.plays and state.trick.lead_suit != state.trick.plays[0].card.suit:
        raise SchemaError("Lead suit does not match the first card of the trick")
    if not state.trick.plays and state.trick.lead_suit is not None:
        raise SchemaError("An empty trick cannot have a lead suit")

    if len(state.completed_tricks) > TRICKS_PER_ROUND:
        raise SchemaError(f"More than {TRICKS_PER_ROUND} tricks completed")
    if state.team_a_tricks_won + state.team_b_tricks_won != len(state.completed_tricks):
        raise SchemaError("Trick tallies do not match the trick history")
    won_by_a = sum(
        1
        for trick in state.completed_tricks
        if Team.for_seat(trick.winner_id) is Team.A
    )
    if won_by_a != state.team_a_tricks_won:
        raise SchemaError("Team A's trick tally does not match the trick history")

    if (state.pot_tens > 0) != (state.pot_tens_team is not None):
        raise SchemaError("pot_tens_team must be set exactly when the pot holds tens")
    if state.team_a_tens + state.team_b_tens + state.pot_tens > TENS_PER_DECK:
        raise SchemaError("More tens counted than exist in the deck")
    captured = sum(trick.tens for trick in state.completed_tricks)
    if state.team_a_tens + state.team_b_tens + state.pot_tens != captured:
        raise SchemaError("Ten tallies do not match the tens in the trick history")

    if state.phase != GamePhase.DEALING and not all_cards_accounted(state):
        raise SchemaError("Cards are missing or duplicated")

    if state.phase == GamePhase.ROUND_END:
        if len(state.completed_tricks) != TRICKS_PER_ROUND:
            raise SchemaError("A finished round must hold every trick")
        if state.winner is None:
            raise SchemaError("A finished round must name a winner")
        if state.pot_tens or state.team_a_tens + state.team_b_tens != TENS_PER_DECK:
            raise SchemaError("Every ten must be confirmed once the round is over")
        outcome = determine_round_winner(
            state.team_a_tens,
            state.team_b_tens,
            state.team_a_tricks_won,
            state.team_b_tricks_won,
        )
        if (state.winner, state.is_mendikot, state.is_whitewash) != (
            outcome.winner,
            outcome.is_mendikot,
            outcome.is_whitewash,
        ):
            raise SchemaError("Round outcome does not match the tens and tricks won")
    elif state.winner is not None:
        raise SchemaError("Only a finished round has a winner")
    elif state.is_mendikot or state.is_whitewash:
        raise SchemaError("Only a finished round has an outcome")


def dumps(state: GameState, **kwargs) -> str:
    """Serialize a round state to a JSON string."""
    return json.dumps(state_to_dict(state), **kwargs)


def loads(text: str) -> GameState:
    """
    Parse and validate a round state from a JSON string.

    Raises:
        SchemaError: If the text is not valid JSON or not a valid round
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON: {e}") from None
    return state_from_dict(data)
