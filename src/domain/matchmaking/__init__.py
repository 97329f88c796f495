"""Team generation, swap refinement, balance scoring and round rotation."""

from domain.matchmaking.balance import (
    BalanceScorer,
    FairnessCurve,
    average_rating,
    calculate_fairness_percent,
)
from domain.matchmaking.common import (
    BalanceReport,
    CourtAssignment,
    MatchmakingResult,
    PlayerGroup,
    PlayerRecord,
    Position,
    Side,
    UnplacedGroup,
    UnplacedReason,
)
from domain.matchmaking.config import MatchmakingSystemConfig, load_matchmaking_system_configs
from domain.matchmaking.editing import move_player, swap_players
from domain.matchmaking.engine import MatchEngine, MatchmakingParameters, generate_teams
from domain.matchmaking.rotation import (
    RotationMode,
    RotationResult,
    RoundMatchup,
    SessionGame,
    SessionTeam,
    TeamStanding,
    calculate_standings,
    generate_next_round,
    is_round_robin_complete,
    should_skip_ratings,
)

__all__ = [
    "BalanceReport",
    "BalanceScorer",
    "CourtAssignment",
    "FairnessCurve",
    "MatchEngine",
    "MatchmakingParameters",
    "MatchmakingResult",
    "MatchmakingSystemConfig",
    "PlayerGroup",
    "PlayerRecord",
    "Position",
    "RotationMode",
    "RotationResult",
    "RoundMatchup",
    "SessionGame",
    "SessionTeam",
    "Side",
    "TeamStanding",
    "UnplacedGroup",
    "UnplacedReason",
    "average_rating",
    "calculate_fairness_percent",
    "calculate_standings",
    "generate_next_round",
    "generate_teams",
    "is_round_robin_complete",
    "load_matchmaking_system_configs",
    "move_player",
    "should_skip_ratings",
    "swap_players",
]
