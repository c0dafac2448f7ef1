"""math utility functions for the normal distribution"""
import math
import statistics
from skillix.utils.constants import EPSILON


def sigmoid_scalar(x):
    """no need to use numpy on scalars"""
    return 1.0 / (1.0 + math.exp(-x))


INV_SQRT_2 = 1.0 / math.sqrt(2.0)


def norm_cdf(x):
    """cdf of standard normal"""
    return 0.5 * (1.0 + math.erf(x * INV_SQRT_2))


STANDARD_NORMAL = statistics.NormalDist()


def norm_pdf(x):
    """pdf of standard normal"""
    return STANDARD_NORMAL.pdf(x)


def norm_ppf(p):
    """inverse cdf of standard normal"""
    return STANDARD_NORMAL.inv_cdf(p)


def v(x, t):
    """additive correction for a win, pdf(x - t) / cdf(x - t)"""
    xt = x - t
    denom = norm_cdf(xt)
    if denom < EPSILON:
        return -xt
    return norm_pdf(xt) / denom


def w(x, t):
    """multiplicative correction for a win"""
    xt = x - t
    denom = norm_cdf(xt)
    if denom < EPSILON:
        return 1.0 if x < 0 else 0.0
    v_xt = v(x, t)
    return v_xt * (v_xt + xt)


def vt(x, t):
    """additive correction for a draw, truncated on both sides of |x|"""
    abs_x = math.fabs(x)  # the papers do NOT do this but ALL open source implementations DO...
    diff_a = t - abs_x
    diff_b = -t - abs_x
    shared_denom = norm_cdf(diff_a) - norm_cdf(diff_b)
    if shared_denom < EPSILON:
        if x < 0.0:
            return -x - t
        return -x + t
    v_num = norm_pdf(diff_b) - norm_pdf(diff_a)
    sign = math.copysign(1.0, x)
    return sign * v_num / shared_denom


def wt(x, t):
    """multiplicative correction for a draw"""
    abs_x = math.fabs(x)
    diff_a = t - abs_x
    diff_b = -t - abs_x
    shared_denom = norm_cdf(diff_a) - norm_cdf(diff_b)
    if shared_denom < EPSILON:
        return 1.0
    w_num = (diff_a * norm_pdf(diff_a)) - (diff_b * norm_pdf(diff_b))
    return math.copysign(1.0, x) * ((w_num / shared_denom) + (vt(x, t) ** 2.0))
