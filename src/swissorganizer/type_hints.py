"""Type hints used in Swiss Organizer."""

from datetime import datetime
from typing import Callable, FrozenSet, List, Literal, Set, Tuple

# Opaque, stable player identifier
PlayerId = str

# Outcome of the pairing engine
PairingKind = Literal["clean", "fallback"]

# (player1_id, player2_id) for one table
PairingIDs = Tuple[PlayerId, PlayerId]
# All tables of one round
RoundPairings = List[PairingIDs]
# Order independent key for two players who have met
PairKey = FrozenSet[PlayerId]
PriorMatchups = Set[PairKey]

# Time source injected into anything that stamps or measures time
Clock = Callable[[], datetime]

#  LocalWords:  PairingIDs RoundPairings PairKey
