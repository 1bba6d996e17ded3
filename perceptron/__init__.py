"""Perceptron multicouche écrit à la main: neurones, couches, réseau et
apprentissage par rétropropagation / descente de gradient."""

from .couche import Layer
from .cycle import Phase, TrainingCycle
from .erreurs import (
	EmptyNeuronList,
	InputWidthMismatch,
	IntermediateStateIncomplete,
	NetworkError,
	TopologyConfigurationInvalid,
	WeightsIncomplete,
)
from .fct_activation import ActivationFunction, get_activation
from .fct_erreur import get_error_function, mean_squared_error, squared_loss_prime
from .neurone import Neuron
from .reseau import Network, NetworkType

__all__ = [
	"ActivationFunction",
	"EmptyNeuronList",
	"InputWidthMismatch",
	"IntermediateStateIncomplete",
	"Layer",
	"Network",
	"NetworkError",
	"NetworkType",
	"Neuron",
	"Phase",
	"TopologyConfigurationInvalid",
	"TrainingCycle",
	"WeightsIncomplete",
	"get_activation",
	"get_error_function",
	"mean_squared_error",
	"squared_loss_prime",
]
