"""Toy datasets used as stand-in fitness tasks."""

from .toy import (
    xor_dataset,
    circles,
    linear_separable,
    steering,
    DATASETS,
    get_dataset,
    list_datasets,
)

__all__ = [
    'xor_dataset',
    'circles',
    'linear_separable',
    'steering',
    'DATASETS',
    'get_dataset',
    'list_datasets',
]
