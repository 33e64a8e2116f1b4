"""Extreme value theory tail-risk estimation.

Losses over a high threshold are modelled with a Generalized Pareto
Distribution (GPD) fitted by the method of moments. The fitted model gives
Value at Risk (VaR) and Expected Shortfall (ES) at extreme confidence levels.
"""

import math
import warnings
from dataclasses import dataclass, field
from random import Random

from wealth_extinction.errors import TailAnalysisDegraded

DEFAULT_THRESHOLD_PERCENTILE = 0.95
MIN_EXCEEDANCES = 10
MIN_LOSSES = 20
SYNTHETIC_SAMPLES = 100
SYNTHETIC_MIN_LOSS = 0.001
DEFAULT_LOSS_MEAN = 0.05
DEFAULT_LOSS_STD = 0.03
SHAPE_EPSILON = 1e-10
SHAPE_BOUNDS = (-0.5, 0.5)
FALLBACK_SHAPE = 0.2
FALLBACK_MIN_EXCEEDANCES = 5
GOF_PVALUE_THRESHOLD = 0.05
FIT_METHODS = ("MOM",)


@dataclass
class GoodnessOfFit:
    statistic: float
    p_value: float
    passed: bool


@dataclass
class GPDModel:
    shape: float
    scale: float
    threshold: float
    threshold_percentile: float
    exceedance_count: int
    total_observations: int
    fit_method: str = "MOM"
    goodness_of_fit: GoodnessOfFit = field(default_factory=lambda: GoodnessOfFit(0.5, 0.1, False))
    fallback: bool = False


@dataclass
class TailEvent:
    description: str
    probability: float
    impact: float
    severity: str


@dataclass
class EVTResult:
    model: GPDModel
    var99: float
    var995: float
    var999: float
    es99: float
    tail_risk: str
    tail_events: list[TailEvent] = field(default_factory=list)
    degraded: bool = False
    degraded_reason: str = ""


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _std(values: list[float]) -> float:
    if not values:
        return 0.0
    m = _mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def wealth_changes(trajectory) -> list[float]:
    """Year-over-year fractional wealth changes, skipping non-positive bases."""
    changes = []
    for prev, curr in zip(trajectory, trajectory[1:]):
        if prev.wealth > 0:
            changes.append((curr.wealth - prev.wealth) / prev.wealth)
    return changes


def losses_from_changes(changes: list[float]) -> list[float]:
    return [-c for c in changes if c < 0]


def _standard_normal(rng: Random) -> float:
    u = 0.0
    while u == 0.0:
        u = rng.random()
    v = 0.0
    while v == 0.0:
        v = rng.random()
    return math.sqrt(-2 * math.log(u)) * math.cos(2 * math.pi * v)


def augment_losses(losses: list[float], rng: Random) -> list[float]:
    """Pad a thin loss sample with normal draws around its empirical moments.

    Samples with at least MIN_LOSSES entries are returned unchanged.
    """
    if len(losses) >= MIN_LOSSES:
        return list(losses)
    if losses:
        # identical losses have no spread to sample from
        mu, sigma = _mean(losses), _std(losses) or DEFAULT_LOSS_STD
    else:
        mu, sigma = DEFAULT_LOSS_MEAN, DEFAULT_LOSS_STD
    synthetic = [
        max(SYNTHETIC_MIN_LOSS, mu + _standard_normal(rng) * sigma)
        for _ in range(SYNTHETIC_SAMPLES)
    ]
    return list(losses) + synthetic


def gpd_cdf(x: float, shape: float, scale: float) -> float:
    if x <= 0:
        return 0.0
    if abs(shape) < SHAPE_EPSILON:
        return 1 - math.exp(-x / scale)
    base = 1 + shape * x / scale
    if base <= 0:
        # beyond the upper endpoint of a bounded (shape < 0) tail
        return 1.0
    return 1 - base ** (-1 / shape)


def _fit_moments(exceedances: list[float]) -> tuple[float, float]:
    mu = _mean(exceedances)
    var = _std(exceedances) ** 2
    ratio = mu * mu / var if var > 0 else math.inf
    if ratio < 0.5:
        shape = 0.5 * (1 - ratio)
        scale = mu * (1 - shape)
    else:
        shape, scale = 0.0, mu
    shape = max(SHAPE_BOUNDS[0], min(SHAPE_BOUNDS[1], shape))
    return shape, scale


def goodness_of_fit(exceedances: list[float], shape: float, scale: float) -> GoodnessOfFit:
    """Simplified Cramer-von Mises distance between empirical and fitted CDFs."""
    ordered = sorted(exceedances)
    n = len(ordered)
    total = sum(((i + 1) / n - gpd_cdf(x, shape, scale)) ** 2 for i, x in enumerate(ordered))
    statistic = total / n
    p_value = math.exp(-statistic * 10)
    return GoodnessOfFit(statistic, p_value, p_value > GOF_PVALUE_THRESHOLD)


def threshold_index(n: int, threshold_percentile: float) -> int:
    """Index of the threshold in a sorted sample of size `n`.

    The `threshold_percentile` quantile, lowered when needed so that
    MIN_EXCEEDANCES order statistics lie above it.
    """
    return max(0, min(math.floor(threshold_percentile * n), n - MIN_EXCEEDANCES - 1))


def fit_gpd(
    data: list[float],
    threshold_percentile: float = DEFAULT_THRESHOLD_PERCENTILE,
    fit_method: str = "MOM",
) -> GPDModel:
    """Fit a GPD to the excesses of `data` over a high threshold.

    The threshold starts at the `threshold_percentile` quantile and moves down
    until MIN_EXCEEDANCES observations exceed it; the model records the
    quantile actually used. Falls back to a conservative heavy-tailed model
    when the sample is too small or too tied to yield that many exceedances.
    """
    if fit_method not in FIT_METHODS:
        raise ValueError(f"Unsupported fit method: {fit_method!r} (supported: {', '.join(FIT_METHODS)})")
    if not data:
        raise ValueError("Cannot fit a tail model to an empty sample")

    n = len(data)
    ordered = sorted(data)
    idx = threshold_index(n, threshold_percentile)
    threshold = ordered[idx]
    exceedances = [x - threshold for x in data if x > threshold]

    if len(exceedances) < MIN_EXCEEDANCES:
        return GPDModel(
            shape=FALLBACK_SHAPE,
            scale=0.5 * _std(data),
            threshold=threshold,
            threshold_percentile=threshold_percentile,
            exceedance_count=max(FALLBACK_MIN_EXCEEDANCES, math.floor(n * (1 - threshold_percentile))),
            total_observations=n,
            fit_method=fit_method,
            goodness_of_fit=GoodnessOfFit(0.5, 0.1, False),
            fallback=True,
        )

    shape, scale = _fit_moments(exceedances)
    return GPDModel(
        shape=shape,
        scale=scale,
        threshold=threshold,
        threshold_percentile=idx / n,
        exceedance_count=len(exceedances),
        total_observations=n,
        fit_method=fit_method,
        goodness_of_fit=goodness_of_fit(exceedances, shape, scale),
    )


def value_at_risk(model: GPDModel, confidence: float) -> float:
    p = (1 - confidence) * model.total_observations / model.exceedance_count
    if abs(model.shape) < SHAPE_EPSILON:
        return model.threshold + model.scale * math.log(1 / p)
    return model.threshold + (model.scale / model.shape) * (p ** -model.shape - 1)


def expected_shortfall(model: GPDModel, confidence: float) -> float:
    """Mean loss beyond VaR; infinite when the tail has no finite mean."""
    if model.shape >= 1:
        return math.inf
    var = value_at_risk(model, confidence)
    return var / (1 - model.shape) + (model.scale - model.shape * model.threshold) / (1 - model.shape)


def assess_tail_risk(shape: float) -> str:
    if shape > 0.3:
        return "EXTREME"
    if shape > 0.1:
        return "HIGH"
    if shape > -0.1:
        return "MEDIUM"
    return "LOW"


def tail_events(var99: float, var995: float, var999: float) -> list[TailEvent]:
    return [
        TailEvent("Major market correction (-20%)", 0.05, var99, "MEDIUM"),
        TailEvent("Severe market crash (-35%)", 0.01, var995, "HIGH"),
        TailEvent("Financial crisis (-50%+)", 0.001, var999, "EXTREME"),
        TailEvent("Simultaneous health emergency and market downturn", 0.02, var995 * 1.2, "HIGH"),
        TailEvent("Prolonged economic recession (2+ years)", 0.03, var99 * 1.5, "HIGH"),
    ]


def analyze_tail_risk(
    losses: list[float],
    rng: Random | None = None,
    threshold_percentile: float = DEFAULT_THRESHOLD_PERCENTILE,
) -> EVTResult:
    """Fit the tail of `losses` and derive VaR, ES and the tail event catalog."""
    if rng is None:
        rng = Random()
    reasons = []
    data = augment_losses(losses, rng)
    if len(data) > len(losses):
        reasons.append(f"only {len(losses)} observed losses, padded with synthetic samples")

    model = fit_gpd(data, threshold_percentile)
    if model.fallback:
        reasons.append("too few exceedances, conservative fallback model used")
    elif not model.goodness_of_fit.passed:
        reasons.append(f"poor fit (p={model.goodness_of_fit.p_value:.3f})")

    var99 = value_at_risk(model, 0.99)
    var995 = value_at_risk(model, 0.995)
    var999 = value_at_risk(model, 0.999)
    es99 = expected_shortfall(model, 0.99)

    reason = "; ".join(reasons)
    if reasons:
        warnings.warn(f"Tail analysis degraded: {reason}", TailAnalysisDegraded, stacklevel=2)

    return EVTResult(
        model=model,
        var99=var99,
        var995=var995,
        var999=var999,
        es99=es99,
        tail_risk=assess_tail_risk(model.shape),
        tail_events=tail_events(var99, var995, var999),
        degraded=bool(reasons),
        degraded_reason=reason,
    )


def fallback_evt_result() -> EVTResult:
    """Fixed conservative result used when the estimator itself fails."""
    model = GPDModel(
        shape=0.2,
        scale=0.05,
        threshold=0.1,
        threshold_percentile=DEFAULT_THRESHOLD_PERCENTILE,
        exceedance_count=10,
        total_observations=100,
        goodness_of_fit=GoodnessOfFit(0.5, 0.1, False),
        fallback=True,
    )
    return EVTResult(
        model=model,
        var99=0.25,
        var995=0.35,
        var999=0.5,
        es99=0.35,
        tail_risk="MEDIUM",
        tail_events=[
            TailEvent("Major market correction (-20%)", 0.05, 0.2, "MEDIUM"),
            TailEvent("Severe market crash (-35%)", 0.01, 0.35, "HIGH"),
            TailEvent("Financial crisis (-50%+)", 0.001, 0.5, "EXTREME"),
        ],
        degraded=True,
        degraded_reason="tail estimator failed, fixed conservative estimate used",
    )
