from .estimator import MarketRegimeEstimator, RegimeReading

__all__ = ["MarketRegimeEstimator", "RegimeReading"]
