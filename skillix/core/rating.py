"""value objects for player beliefs and aggregated team beliefs"""
from dataclasses import dataclass, replace
from typing import Tuple
from skillix.utils.constants import MU, SIGMA, ORDINAL_Z


@dataclass(frozen=True)
class Rating:
    """Gaussian belief about the skill of a single player"""

    mu: float = MU
    sigma: float = SIGMA

    def ordinal(self, z: float = ORDINAL_Z, alpha: float = 1.0, target: float = 0.0) -> float:
        """
        Conservative single number estimate of skill.

        Parameters:
            z (float): how many standard deviations to subtract from mu. Defaults to 3.
            alpha (float): scaling factor applied to the result. Defaults to 1.
            target (float): value the scaled ordinal of a brand new player is shifted towards. Defaults to 0.

        Returns:
            float: alpha * ((mu - z * sigma) + target / alpha)
        """
        return alpha * ((self.mu - (z * self.sigma)) + (target / alpha))

    def clone(self) -> 'Rating':
        return replace(self)


@dataclass(frozen=True)
class TeamRating:
    """a team's summed belief along with its placement in the match"""

    players: Tuple[Rating, ...]
    mu: float
    sigma_sq: float
    rank: int
