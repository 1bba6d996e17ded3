"""neurone

Rôle
	Un neurone: vecteur de poids, biais, signal d'erreur en cache et paire
	d'activation (Fi, Fp).

Formules (pour une entrée x de taille n)
	i       = b + Σ_k w[k] * x[k]            (pré-activation)
	sortie  = Fi(i)
	erreur  = Fp(i) * Σ_j delta_j * w_j      (delta/poids de la couche suivante)
	maj     : w[k] <- w[k] - eta * erreur * x[k]
	          b    <- b    - eta * erreur

Le signal d'erreur est écrit par `calculate_error` (ou `set_error` pour le
neurone de sortie) puis lu par `step_gradient`, dans cet ordre.
"""

from __future__ import annotations

import random
from typing import List, Sequence, Tuple

from .console import fmt_nombre, fmt_vecteur
from .erreurs import IntermediateStateIncomplete, WeightsIncomplete
from .fct_activation import ActivationFunction


class Neuron:
	"""Neurone à poids individuels (pas de matrice partagée)."""

	# ==================== __init__ =========================
	def __init__(
		self,
		weights: Sequence[float],
		bias: float,
		activation: ActivationFunction,
		learning_rate: float,
	):
		self.weights: List[float] = [float(w) for w in weights]
		self.bias = float(bias)
		self.activation = activation
		self.learning_rate = float(learning_rate)
		self.current_error: float | None = None

	# ==================== aleatoire =========================
	@classmethod
	def aleatoire(
		cls,
		number_of_weights: int,
		activation: ActivationFunction,
		learning_rate: float,
		rng: random.Random,
		weight_range: Tuple[float, float] = (-1.0, 1.0),
		bias_range: Tuple[float, float] = (-1.0, 1.0),
	) -> "Neuron":
		"""Crée un neurone aux poids/biais uniformes dans les bornes données."""
		p_min, p_max = float(weight_range[0]), float(weight_range[1])
		b_min, b_max = float(bias_range[0]), float(bias_range[1])
		weights = [rng.uniform(p_min, p_max) for _ in range(int(number_of_weights))]
		bias = rng.uniform(b_min, b_max)
		return cls(weights, bias, activation, learning_rate)

	@property
	def input_width(self) -> int:
		return len(self.weights)

	# ==================== weighted_sum =========================
	def weighted_sum(self, inputs: Sequence[float]) -> float:
		"""Calcule la pré-activation i = b + Σ w[k] * x[k]."""
		if len(inputs) != len(self.weights):
			raise ValueError(
				f"Les entrées ({len(inputs)}) et les poids ({len(self.weights)}) doivent avoir la même longueur."
			)
		acc = self.bias
		for weight, value in zip(self.weights, inputs):
			acc += weight * value
		return acc

	def compute(self, inputs: Sequence[float]) -> float:
		return self.activation.apply(self.weighted_sum(inputs))

	def compute_without_activation(self, inputs: Sequence[float]) -> float:
		return self.weighted_sum(inputs)

	# ==================== calculate_error =========================
	def calculate_error(
		self,
		inputs: Sequence[float],
		next_layer_errors_caused: Sequence[float],
		next_layer_weights_for_this_neuron: Sequence[float],
	) -> float:
		"""Règle de chaîne: Fp(i) * Σ_j delta_j * w_j, mémorisé dans current_error.

		`next_layer_weights_for_this_neuron[j]` est le poids que le neurone j de
		la couche suivante applique à la sortie de ce neurone.
		"""
		if len(next_layer_errors_caused) != len(next_layer_weights_for_this_neuron):
			raise WeightsIncomplete(
				f"{len(next_layer_errors_caused)} erreur(s) pour {len(next_layer_weights_for_this_neuron)} poids en aval."
			)
		somme = 0.0
		for delta, weight in zip(next_layer_errors_caused, next_layer_weights_for_this_neuron):
			somme += delta * weight
		self.current_error = self.activation.derivative(self.weighted_sum(inputs)) * somme
		return self.current_error

	def set_error(self, value: float) -> None:
		self.current_error = float(value)

	# ==================== step_gradient =========================
	def step_gradient(self, inputs: Sequence[float]) -> None:
		"""Descente de gradient avec l'erreur en cache et l'entrée qui l'a produite."""
		if self.current_error is None:
			raise IntermediateStateIncomplete(
				"step_gradient appelé avant calculate_error/set_error (aucun signal d'erreur)."
			)
		if len(inputs) != len(self.weights):
			raise ValueError(
				f"Les entrées ({len(inputs)}) et les poids ({len(self.weights)}) doivent avoir la même longueur."
			)
		correction = self.learning_rate * self.current_error
		for k, value in enumerate(inputs):
			self.weights[k] -= correction * value
		self.bias -= correction

	def get_bias(self) -> float:
		return self.bias

	def __str__(self) -> str:
		erreur = "-" if self.current_error is None else fmt_nombre(self.current_error)
		return f"Neurone: poids={fmt_vecteur(self.weights)} biais={fmt_nombre(self.bias)} erreur={erreur}"
