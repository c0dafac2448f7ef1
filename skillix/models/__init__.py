"""
Models Module
=============

This module contains the team based Bayesian online rating models. Every player is a Gaussian belief about their skill
and each observed match (a ranking, a set of scores or ties, optionally with player contribution weights and score margins)
is turned into an approximate posterior for everyone who took part.

Included Rating Systems:
- Plackett-Luce: Weng-Lin with full pairing, each team is compared with every other team in the match.
- Bradley-Terry (partial pairing): Weng-Lin with logistic pairwise comparisons against the teams ranked nearby.

Both share the same orchestration in skillix.core.base and differ only in which teams are compared and how ties are settled.
The uncertainty decay (gamma) can be swapped by passing any function with the signature of default_gamma.
"""
from skillix.core.base import default_gamma
from skillix.models.weng_lin import BradleyTerryPart, PlackettLuce, WengLin
