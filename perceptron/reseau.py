"""reseau

Rôle
	Réseau complet (perceptron multicouche à une sortie scalaire) et son
	cycle d'apprentissage en trois phases:
		1) propagation avant (`feedforward_compute`) -> cache des activations
		2) rétropropagation (`backpropagate_error`) -> erreur de chaque neurone
		3) descente de gradient (`step_gradient`) -> maj poids/biais, cache vidé

Topologies (choisies à la construction selon la profondeur demandée)
	| profondeur | type                 | couche d'entrée      | cachées | sortie               |
	| 1          | SingleNeuron         | vide (0 neurone)     | aucune  | 1 neurone, n_in      |
	| 2          | TwoLayerPerceptron   | N_b[0] neurones      | aucune  | 1 neurone, N_b[0]    |
	| >= 3       | MultiLayerPerceptron | N_b[0] neurones      | D-2     | 1 neurone, N_b[D-2]  |

	Toutes les couches sont conservées dans une seule liste `layers`
	(entrée, cachées, sortie). La couche d'entrée vide du neurone seul est
	ignorée par toutes les phases; les trois topologies partagent donc le même
	code de propagation.

Cache `intermediate_values`
	Une entrée par couche traversée: le vecteur que cette couche a consommé.
	Index 0 = entrées brutes, dernier = activations qui entrent dans la couche
	de sortie. Longueur 1 (neurone seul), 2 (deux couches), D (D couches).
"""

from __future__ import annotations

import random
from enum import Enum
from typing import List, Sequence, Tuple, Union

from .console import affiche_reseau
from .couche import Layer
from .cycle import Phase, TrainingCycle
from .erreurs import (
	InputWidthMismatch,
	IntermediateStateIncomplete,
	NetworkError,
	TopologyConfigurationInvalid,
)
from .fct_activation import ActivationFunction, get_activation
from .fct_erreur import ErrorFunction, mean_squared_error, squared_loss_prime


class NetworkType(Enum):
	SINGLE_NEURON = "SingleNeuron"
	TWO_LAYER_PERCEPTRON = "TwoLayerPerceptron"
	MULTI_LAYER_PERCEPTRON = "MultiLayerPerceptron"

	@classmethod
	def from_depth(cls, network_depth: int) -> "NetworkType":
		if network_depth == 1:
			return cls.SINGLE_NEURON
		if network_depth == 2:
			return cls.TWO_LAYER_PERCEPTRON
		return cls.MULTI_LAYER_PERCEPTRON


# ==================== _normalize_widths =========================
def _normalize_widths(network_depth: int, network_width: Union[int, Sequence[int], None]) -> List[int]:
	"""Retourne les largeurs utilisées (couche d'entrée puis cachées).

	- entier : largeur uniforme répétée
	- liste  : au moins `network_depth - 1` valeurs (les suivantes sont ignorées)
	"""
	needed = network_depth - 1
	if needed == 0:
		return []
	if network_width is None:
		raise TopologyConfigurationInvalid(f"network_width est requis pour une profondeur {network_depth}.")
	if isinstance(network_width, int):
		widths = [network_width] * needed
	else:
		widths = [int(w) for w in network_width]
		if len(widths) < needed:
			raise TopologyConfigurationInvalid(
				f"Liste de largeurs trop courte: {len(widths)} valeur(s) pour une profondeur {network_depth} "
				f"(attendu au moins {needed})."
			)
		widths = widths[:needed]
	if any(w <= 0 for w in widths):
		raise TopologyConfigurationInvalid("Toutes les largeurs de couche doivent être > 0.")
	return widths


# ==================== build_layer_sizes =========================
def build_layer_sizes(
	network_type: NetworkType,
	widths: Sequence[int],
	input_width: int,
) -> List[Tuple[int, int]]:
	"""Construit (nb_neurones, nb_entrees) pour chaque couche, sortie comprise.

	Convention:
		- SingleNeuron         : [(0, n_in), (1, n_in)]
		- TwoLayerPerceptron   : [(N_b[0], n_in), (1, N_b[0])]
		- MultiLayerPerceptron : [(N_b[0], n_in), (N_b[1], N_b[0]), ..., (1, N_b[-1])]
	"""
	if network_type is NetworkType.SINGLE_NEURON:
		return [(0, input_width), (1, input_width)]

	sizes: List[Tuple[int, int]] = []
	fan_in = input_width
	for width in widths:
		sizes.append((width, fan_in))
		fan_in = width
	sizes.append((1, fan_in))
	return sizes


class Network:
	"""Perceptron multicouche à sortie scalaire, entraîné par rétropropagation."""

	# ==================== __init__ =========================
	def __init__(
		self,
		network_depth: int,
		network_width: Union[int, Sequence[int], None],
		input_width: int,
		learning_rate: float,
		activation: Union[ActivationFunction, str, int],
		error_function: ErrorFunction = squared_loss_prime,
		*,
		activated_output: bool = False,
		rng: random.Random | None = None,
		seed: int | None = None,
		weight_range: Tuple[float, float] = (-1.0, 1.0),
		bias_range: Tuple[float, float] = (-1.0, 1.0),
	):
		"""Construit les couches selon la topologie déduite de `network_depth`.

		Paramètres
			network_depth : nombre total de couches (entrée et sortie comprises)
			network_width : largeur uniforme (int) ou liste par couche
			input_width : nombre d'entrées attendues
			learning_rate : eta
			activation : paire (Fi, Fp), nom ou identifiant n_fct
			error_function : f(aim, final_answer) -> signal d'erreur de sortie
			activated_output : True -> la sortie applique Fi, False -> sortie brute
			rng / seed : générateur local (répétable avec seed)
		"""
		if int(network_depth) < 1:
			raise TopologyConfigurationInvalid("network_depth doit être >= 1")
		if int(input_width) < 1:
			raise TopologyConfigurationInvalid("input_width doit être >= 1")

		self.network_depth = int(network_depth)
		self.input_width = int(input_width)
		self.learning_rate = float(learning_rate)
		self.activation = get_activation(activation)
		self.error_function = error_function
		self.activated_output = bool(activated_output)
		self.network_type = NetworkType.from_depth(self.network_depth)
		self.network_width = _normalize_widths(self.network_depth, network_width)
		# RNG local (répétable avec seed, et n'impacte pas le hasard global).
		self._rng = rng if rng is not None else random.Random(seed)

		self.layers: List[Layer] = [
			Layer.creer(
				layer_width,
				fan_in,
				self.learning_rate,
				self.activation,
				self._rng,
				weight_range,
				bias_range,
			)
			for layer_width, fan_in in build_layer_sizes(self.network_type, self.network_width, self.input_width)
		]

		self._intermediate_values: List[List[float]] = []
		self.phase = Phase.IDLE

	# ==================== accès aux couches ====================
	@property
	def input_layer(self) -> Layer:
		return self.layers[0]

	@property
	def common_layers(self) -> List[Layer]:
		return self.layers[1:-1]

	@property
	def output_layer(self) -> Layer:
		return self.layers[-1]

	@property
	def active_layers(self) -> List[Layer]:
		"""Couches réellement traversées (sans la couche d'entrée fictive)."""
		if self.network_type is NetworkType.SINGLE_NEURON:
			return self.layers[1:]
		return list(self.layers)

	@property
	def intermediate_values(self) -> List[List[float]]:
		return [list(values) for values in self._intermediate_values]

	# ==================== helpers (privés) ====================
	def _check_inputs(self, inputs: Sequence[float]) -> None:
		if len(inputs) != self.input_width:
			raise InputWidthMismatch(len(inputs), self.input_width)

	def _check_cache(self, values: Sequence[Sequence[float]], operation: str) -> None:
		"""Le cache doit contenir exactement l'entrée de chaque couche traversée."""
		active = self.active_layers
		if len(values) != len(active):
			raise IntermediateStateIncomplete(
				f"{operation}: cache de {len(values)} vecteur(s), attendu {len(active)}."
			)
		for index, (layer, layer_inputs) in enumerate(zip(active, values)):
			if len(layer_inputs) != layer.input_width:
				raise IntermediateStateIncomplete(
					f"{operation}: vecteur {index} de taille {len(layer_inputs)}, attendu {layer.input_width}."
				)

	def _output(self, last_values: Sequence[float]) -> float:
		if self.activated_output:
			return self.output_layer.compute_n_to_1(last_values)
		return self.output_layer.compute_n_to_1_without_activation_layer(last_values)

	# ==================== _forward_pass =========================
	def _forward_pass(self, inputs: Sequence[float]) -> Tuple[List[List[float]], float]:
		"""Propagation avant pure: (valeurs intermédiaires, sortie). Aucun état modifié."""
		values: List[List[float]] = [[float(x) for x in inputs]]
		for layer in self.active_layers[:-1]:
			values.append(layer.compute_m_to_n(values[-1]))
		return values, self._output(values[-1])

	# ==================== _backpropagate =========================
	def _backpropagate(self, final_error: float, values: Sequence[Sequence[float]]) -> List[List[float]]:
		"""Remonte l'erreur de la sortie vers l'entrée, couche par couche.

		La couche `index` reçoit les erreurs de la couche `index + 1` et la
		matrice de poids de celle-ci, lue avant toute mise à jour.
		"""
		active = self.active_layers
		self.output_layer.set_final_layer_error(final_error)

		errors: List[float] = [float(final_error)]
		layer_errors: List[List[float]] = [errors]
		for index in range(len(active) - 2, -1, -1):
			next_layer_weights_by_neuron = active[index + 1].get_weights_by_neurons()
			errors = active[index].compute_layer_errors(values[index], errors, next_layer_weights_by_neuron)
			layer_errors.insert(0, errors)
		return layer_errors

	def _step(self, values: Sequence[Sequence[float]]) -> None:
		for layer, layer_inputs in zip(self.active_layers, values):
			layer.step_gradient(layer_inputs)

	# ==================== feedforward_compute =========================
	def feedforward_compute(self, inputs: Sequence[float]) -> float:
		"""Phase 1: calcule la prédiction et remplit le cache."""
		if self.phase is not Phase.IDLE:
			raise IntermediateStateIncomplete(
				f"feedforward_compute: un cycle est en cours (phase={self.phase.value}); appeler reset()."
			)
		self._check_inputs(inputs)
		values, output = self._forward_pass(inputs)
		self._intermediate_values = values
		self.phase = Phase.FORWARD_COMPLETE
		return output

	# ==================== backpropagate_error =========================
	def backpropagate_error(self, final_error: float) -> List[List[float]]:
		"""Phase 2: installe l'erreur de sortie et la rétropropage.

		Retourne les vecteurs d'erreur par couche traversée (côté entrée d'abord,
		la sortie en dernier).
		"""
		if self.phase is not Phase.FORWARD_COMPLETE:
			raise IntermediateStateIncomplete(
				f"backpropagate_error: propagation avant manquante (phase={self.phase.value})."
			)
		self._check_cache(self._intermediate_values, "backpropagate_error")
		layer_errors = self._backpropagate(final_error, self._intermediate_values)
		self.phase = Phase.BACKWARD_COMPLETE
		return layer_errors

	# ==================== step_gradient =========================
	def step_gradient(self, inputs: Sequence[float] | None = None) -> None:
		"""Phase 3: met à jour chaque couche avec le vecteur qui l'a alimentée, puis vide le cache.

		`inputs`, si fourni, remplace les entrées brutes du cache pour la
		première couche traversée (ce doit être le même vecteur).
		"""
		if self.phase is not Phase.BACKWARD_COMPLETE:
			raise IntermediateStateIncomplete(
				f"step_gradient: rétropropagation manquante (phase={self.phase.value})."
			)
		values = self._intermediate_values
		if inputs is not None:
			self._check_inputs(inputs)
			values = [[float(x) for x in inputs]] + values[1:]
		self._check_cache(values, "step_gradient")
		self._step(values)
		self.reset()

	def reset(self) -> None:
		"""Abandonne le cycle courant: cache vidé, phase IDLE."""
		self._intermediate_values = []
		self.phase = Phase.IDLE

	reset_intermediate_values = reset

	# ==================== apprentissage ====================
	def train_iteration(self, inputs: Sequence[float], target: float) -> float:
		"""Un cycle complet sur un exemple. Retourne la prédiction avant mise à jour."""
		with TrainingCycle(self) as cycle:
			prediction = cycle.forward(inputs)
			cycle.backward_target(target)
			cycle.apply_gradient()
		return prediction

	batch_train_one_iteration = train_iteration

	def iterations_train(self, inputs_list: Sequence[Sequence[float]], targets: Sequence[float]) -> List[float]:
		"""Un cycle par exemple, dans l'ordre fourni."""
		if len(targets) != len(inputs_list):
			raise InputWidthMismatch(len(targets), len(inputs_list), "cibles")
		return [self.train_iteration(inputs, target) for inputs, target in zip(inputs_list, targets)]

	# ==================== batch_train =========================
	def batch_train(self, inputs_list: Sequence[Sequence[float]], targets: Sequence[float]) -> float:
		"""Apprentissage par lot moyenné.

		Moyenne, sur tous les exemples, le signal d'erreur de sortie *et* chaque
		vecteur du cache de propagation avant, puis effectue une seule
		rétropropagation + descente de gradient avec ces moyennes. Ce n'est pas
		la moyenne des gradients; ce comportement est voulu et conservé.

		Retourne le signal d'erreur moyen.
		"""
		if self.phase is not Phase.IDLE:
			raise IntermediateStateIncomplete(
				f"batch_train: un cycle est en cours (phase={self.phase.value}); appeler reset()."
			)
		if len(targets) != len(inputs_list):
			raise InputWidthMismatch(len(targets), len(inputs_list), "cibles")
		if not inputs_list:
			raise NetworkError("batch_train: aucun exemple fourni.")

		total_error = 0.0
		total_values: List[List[float]] = []
		for inputs, target in zip(inputs_list, targets):
			self._check_inputs(inputs)
			values, final_answer = self._forward_pass(inputs)
			total_error += self.error_function(target, final_answer)
			if not total_values:
				total_values = [list(row) for row in values]
				continue
			for index, row in enumerate(values):
				for secondary_index, item in enumerate(row):
					total_values[index][secondary_index] += item

		n = len(inputs_list)
		average_values = [[value / n for value in row] for row in total_values]
		average_error = total_error / n

		self._intermediate_values = average_values
		self.phase = Phase.FORWARD_COMPLETE
		self.backpropagate_error(average_error)
		self.step_gradient()
		return average_error

	# ==================== prédiction ====================
	def predict(self, inputs: Sequence[float]) -> float:
		"""Propagation avant seule; ne touche ni au cache ni à la phase."""
		self._check_inputs(inputs)
		return self._forward_pass(inputs)[1]

	def predict_batch(self, inputs_list: Sequence[Sequence[float]]) -> List[float]:
		return [self.predict(inputs) for inputs in inputs_list]

	def evaluate(self, inputs_list: Sequence[Sequence[float]], targets: Sequence[float]) -> float:
		"""Erreur quadratique moyenne des prédictions courantes."""
		return mean_squared_error(list(targets), self.predict_batch(inputs_list))

	# ==================== paramètres ====================
	def get_parameters(self) -> Tuple[List[List[List[float]]], List[List[float]]]:
		"""Retourne (poids, biais) des couches traversées; poids par neurone."""
		active = self.active_layers
		return (
			[layer.get_weights_by_neurons() for layer in active],
			[layer.get_biases() for layer in active],
		)

	# ==================== set_parameters =========================
	def set_parameters(
		self,
		weights: Sequence[Sequence[Sequence[float]]],
		biases: Sequence[Sequence[float]],
	) -> None:
		"""Injecte poids/biais (même forme que `get_parameters`) après vérification."""
		active = self.active_layers
		if len(weights) != len(active) or len(biases) != len(active):
			raise TopologyConfigurationInvalid(
				f"Nombre de couches invalide: attendu {len(active)}, reçu {len(weights)} (poids) / {len(biases)} (biais)."
			)
		for c, (layer, layer_weights, layer_biases) in enumerate(zip(active, weights, biases), start=1):
			if len(layer_weights) != layer.width or len(layer_biases) != layer.width:
				raise TopologyConfigurationInvalid(
					f"Couche {c}: attendu {layer.width} neurone(s), reçu {len(layer_weights)} (poids) / {len(layer_biases)} (biais)."
				)
			for j, row in enumerate(layer_weights, start=1):
				if len(row) != layer.input_width:
					raise TopologyConfigurationInvalid(
						f"Couche {c}, neurone {j}: attendu {layer.input_width} poids, reçu {len(row)}."
					)

		for layer, layer_weights, layer_biases in zip(active, weights, biases):
			for neuron, row, bias in zip(layer.neurons, layer_weights, layer_biases):
				neuron.weights = [float(w) for w in row]
				neuron.bias = float(bias)

	def __str__(self) -> str:
		return affiche_reseau(self)
