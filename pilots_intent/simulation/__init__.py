"""Simulation module for constant-input trajectory prediction.

Provides the prediction driver that holds the control fixed and steps a
dynamics model over a fixed horizon.

Example:
    >>> from pilots_intent.simulation import PredictionConfig, predict_with_config
    >>>
    >>> config = PredictionConfig(t_final=10.0, steps=1000)
    >>> prediction = predict_with_config(pilot_input, state, model, Rk4(), config)
    >>> df = prediction.to_dataframe()
"""

from pilots_intent.simulation.predict import (
    Prediction,
    PredictionConfig,
    predict,
    predict_with_config,
)

__all__ = [
    "Prediction",
    "PredictionConfig",
    "predict",
    "predict_with_config",
]
