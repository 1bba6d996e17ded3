"""couche

Rôle
	Une couche = liste ordonnée de neurones de même largeur d'entrée.

Adressage des poids
	`get_weights_by_neurons()` retourne une ligne par neurone (ses poids
	entrants). La couche *précédente* lit la colonne i de cette structure pour
	son neurone i: `[ligne[i] for ligne in next_layer_weights_by_neuron]`.

Une couche ne connaît pas ses voisines: le réseau lui fournit, à chaque
appel, les activations, erreurs ou poids de la couche adjacente.
"""

from __future__ import annotations

import random
from typing import List, Sequence, Tuple

from .erreurs import EmptyNeuronList, WeightsIncomplete
from .fct_activation import ActivationFunction
from .neurone import Neuron


class Layer:
	"""Couche dense de neurones."""

	# ==================== __init__ =========================
	def __init__(self, neurons: Sequence[Neuron], input_width: int | None = None):
		self.neurons: List[Neuron] = list(neurons)
		if input_width is None:
			if not self.neurons:
				raise ValueError("input_width est requis pour une couche sans neurone")
			input_width = self.neurons[0].input_width
		self.input_width = int(input_width)
		for index, neuron in enumerate(self.neurons):
			if neuron.input_width != self.input_width:
				raise ValueError(
					f"Neurone {index}: {neuron.input_width} poids, attendu {self.input_width} (largeur d'entrée uniforme)."
				)

	# ==================== creer =========================
	@classmethod
	def creer(
		cls,
		layer_width: int,
		input_width: int,
		learning_rate: float,
		activation: ActivationFunction,
		rng: random.Random,
		weight_range: Tuple[float, float] = (-1.0, 1.0),
		bias_range: Tuple[float, float] = (-1.0, 1.0),
	) -> "Layer":
		"""Crée `layer_width` neurones aléatoires de `input_width` poids chacun."""
		neurons = [
			Neuron.aleatoire(input_width, activation, learning_rate, rng, weight_range, bias_range)
			for _ in range(int(layer_width))
		]
		return cls(neurons, input_width=input_width)

	@property
	def width(self) -> int:
		return len(self.neurons)

	def __len__(self) -> int:
		return len(self.neurons)

	# ==================== _fetch_next_layer_weights_for_neuron =========================
	@staticmethod
	def _fetch_next_layer_weights_for_neuron(
		next_layer_weights_by_neuron: Sequence[Sequence[float]],
		index: int,
	) -> List[float]:
		"""Extrait la colonne `index` (un poids par neurone de la couche suivante)."""
		column: List[float] = []
		for j, neuron_weights in enumerate(next_layer_weights_by_neuron):
			if index >= len(neuron_weights):
				raise WeightsIncomplete(
					f"Poids incomplets: le neurone {j} de la couche suivante a {len(neuron_weights)} poids, "
					f"index {index} demandé."
				)
			column.append(neuron_weights[index])
		return column

	def compute_m_to_n(self, inputs: Sequence[float]) -> List[float]:
		return [neuron.compute(inputs) for neuron in self.neurons]

	def compute_n_to_1(self, inputs: Sequence[float]) -> float:
		"""Somme des sorties activées de tous les neurones."""
		return sum(neuron.compute(inputs) for neuron in self.neurons)

	def compute_n_to_1_without_activation_layer(self, inputs: Sequence[float]) -> float:
		"""Somme des pré-activations (sortie brute, ex. régression identité)."""
		return sum(neuron.compute_without_activation(inputs) for neuron in self.neurons)

	# ==================== compute_layer_errors =========================
	def compute_layer_errors(
		self,
		inputs: Sequence[float],
		next_layer_errors_caused: Sequence[float],
		next_layer_weights_by_neuron: Sequence[Sequence[float]],
	) -> List[float]:
		"""Calcule l'erreur de chaque neurone à partir de la couche suivante."""
		errors: List[float] = []
		for i, neuron in enumerate(self.neurons):
			column = self._fetch_next_layer_weights_for_neuron(next_layer_weights_by_neuron, i)
			errors.append(neuron.calculate_error(inputs, next_layer_errors_caused, column))
		return errors

	def compute_absolute_error(self, inputs: Sequence[float], output: float) -> float:
		return self.compute_n_to_1(inputs) - output

	def set_final_layer_error(self, error: float) -> None:
		if not self.neurons:
			raise EmptyNeuronList("Impossible d'affecter l'erreur finale: la couche n'a aucun neurone.")
		self.neurons[0].set_error(error)

	def step_gradient(self, inputs: Sequence[float]) -> None:
		for neuron in self.neurons:
			neuron.step_gradient(inputs)

	def get_weights_by_neurons(self) -> List[List[float]]:
		return [list(neuron.weights) for neuron in self.neurons]

	def get_biases(self) -> List[float]:
		return [neuron.bias for neuron in self.neurons]

	def get_errors(self) -> List[float | None]:
		return [neuron.current_error for neuron in self.neurons]

	def accumulate_bias(self) -> float:
		acc = 0.0
		for neuron in self.neurons:
			acc += neuron.get_bias()
		return acc

	def __str__(self) -> str:
		lines = [f"Couche ({self.width} neurone(s), {self.input_width} entrée(s)):"]
		for neuron in self.neurons:
			lines.append(f"\t{neuron}")
		return "\n".join(lines)
