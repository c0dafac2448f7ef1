"""exceptions raised while validating the inputs of a rating update"""


class ConflictingInputsError(ValueError):
    """both ranks and scores were supplied for the same match"""


class LengthMismatchError(ValueError):
    """a per-team or per-player argument does not line up with the teams"""
