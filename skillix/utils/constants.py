"""default hyperparameters and numerical constants computed once here to avoid recomputation"""

# model defaults
MU = 25.0
SIGMA = MU / 3.0
BETA = MU / 6.0
BETA_SQUARED = BETA**2.0
KAPPA = 0.0001
TAU = MU / 300.0
MARGIN = 0.0
WINDOW_SIZE = 4

# ordinal = mu - z * sigma
ORDINAL_Z = 3.0

# player weights are rescaled into this range before an update
WEIGHT_MIN = 1.0
WEIGHT_MAX = 2.0
# stand-in range when every weight in a team is identical
ZERO_RANGE = 0.0001

# truncated normal guards
EPSILON = 1e-10
