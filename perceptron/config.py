"""config

Rôle
	Paramètres d'apprentissage regroupés dans `TrainingConfig`, lus depuis
	l'environnement (`PERCEPTRON_*`) avec des valeurs par défaut.

Variables reconnues
	PERCEPTRON_DEPTH            profondeur du réseau (défaut 1)
	PERCEPTRON_WIDTH            largeurs, ex. "4" ou "4,3" (défaut 4)
	PERCEPTRON_INPUT_WIDTH      nombre d'entrées; vide = déduit du fichier
	PERCEPTRON_ETA              taux d'apprentissage (défaut 0.01)
	PERCEPTRON_ACTIVATION       nom ou n_fct (défaut identity)
	PERCEPTRON_LOSS             squared / half_squared / absolute
	PERCEPTRON_EPOCHS           nombre d'époques (défaut 100)
	PERCEPTRON_MODE             iteration / batch
	PERCEPTRON_SEED             graine du générateur; vide = aléatoire
	PERCEPTRON_ACTIVATED_OUTPUT 1 -> la sortie applique l'activation
	PERCEPTRON_SHUFFLE          1 -> mélange des exemples à chaque époque
	PERCEPTRON_CONSOLE          silencieux / minimal / détaillé

Une valeur illisible retombe sur la valeur par défaut.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Tuple

from .console import console_policy
from .fct_activation import get_activation
from .fct_erreur import get_error_function
from .reseau import Network


MODES = ("iteration", "batch")


def _env_int(name: str, default: int) -> int:
	try:
		return int(os.environ.get(name, str(default)).strip())
	except ValueError:
		return default


def _env_optional_int(name: str, default: int | None) -> int | None:
	raw = os.environ.get(name)
	if raw is None or raw.strip() == "":
		return default
	try:
		return int(raw.strip())
	except ValueError:
		return default


def _env_float(name: str, default: float) -> float:
	try:
		return float(os.environ.get(name, str(default)).strip().replace(",", "."))
	except ValueError:
		return default


def _env_bool(name: str, default: bool) -> bool:
	"""Lit un booléen depuis l'environnement.

	Accepte (case-insensitive): 1/0, true/false, yes/no, y/n, on/off.
	"""
	raw = os.environ.get(name)
	if raw is None:
		return bool(default)
	s = raw.strip().lower()
	if s in {"1", "true", "yes", "y", "on"}:
		return True
	if s in {"0", "false", "no", "n", "off"}:
		return False
	return bool(default)


def _env_str(name: str, default: str) -> str:
	raw = os.environ.get(name)
	if raw is None or not raw.strip():
		return default
	return raw.strip()


def parse_int_list(text: str) -> List[int] | None:
	"""Parse une liste d'entiers depuis un texte (ex: "2, 3" / "[2 3]")."""
	clean = (text or "").replace("[", "").replace("]", "").strip()
	if not clean:
		return []
	parts = [p.strip() for p in clean.replace(",", " ").split() if p.strip()]
	try:
		return [int(p) for p in parts]
	except ValueError:
		return None


def _env_int_list(name: str, default: List[int]) -> List[int]:
	raw = os.environ.get(name)
	if raw is None:
		return list(default)
	values = parse_int_list(raw)
	if not values:
		return list(default)
	return values


@dataclass
class TrainingConfig:
	"""Paramètres d'un apprentissage (réseau + boucle d'époques)."""

	depth: int = 1
	widths: List[int] = field(default_factory=lambda: [4])
	input_width: int | None = None
	eta: float = 0.01
	activation: str = "identity"
	loss: str = "squared"
	epochs: int = 100
	mode: str = "iteration"
	seed: int | None = None
	weight_range: Tuple[float, float] = (-1.0, 1.0)
	bias_range: Tuple[float, float] = (-1.0, 1.0)
	activated_output: bool = False
	shuffle: bool = False
	console: str = "minimal"

	# ==================== from_env =========================
	@staticmethod
	def from_env() -> "TrainingConfig":
		"""Construit la configuration depuis les variables PERCEPTRON_*."""
		return TrainingConfig(
			depth=_env_int("PERCEPTRON_DEPTH", 1),
			widths=_env_int_list("PERCEPTRON_WIDTH", [4]),
			input_width=_env_optional_int("PERCEPTRON_INPUT_WIDTH", None),
			eta=_env_float("PERCEPTRON_ETA", 0.01),
			activation=_env_str("PERCEPTRON_ACTIVATION", "identity"),
			loss=_env_str("PERCEPTRON_LOSS", "squared"),
			epochs=_env_int("PERCEPTRON_EPOCHS", 100),
			mode=_env_str("PERCEPTRON_MODE", "iteration").lower(),
			seed=_env_optional_int("PERCEPTRON_SEED", None),
			activated_output=_env_bool("PERCEPTRON_ACTIVATED_OUTPUT", False),
			shuffle=_env_bool("PERCEPTRON_SHUFFLE", False),
			console=_env_str("PERCEPTRON_CONSOLE", "minimal"),
		)

	# ==================== layer_widths =========================
	def layer_widths(self) -> List[int]:
		"""Largeurs passées au réseau: une seule valeur = largeur uniforme."""
		if len(self.widths) == 1 and self.depth > 2:
			return list(self.widths) * (self.depth - 1)
		return list(self.widths)

	# ==================== validate =========================
	def validate(self) -> None:
		"""Vérifie la cohérence; lève ValueError avec un message lisible."""
		if self.depth < 1:
			raise ValueError("depth doit être >= 1")
		widths = self.layer_widths()
		if self.depth > 1 and len(widths) < self.depth - 1:
			raise ValueError(
				f"widths doit contenir une valeur ou au moins depth - 1 = {self.depth - 1} valeur(s), reçu {len(widths)}"
			)
		if any(w <= 0 for w in self.widths):
			raise ValueError("widths: toutes les valeurs doivent être >= 1")
		if self.input_width is not None and self.input_width < 1:
			raise ValueError("input_width doit être >= 1")
		if self.epochs < 0:
			raise ValueError("epochs doit être >= 0")
		if self.mode not in MODES:
			raise ValueError(f"mode invalide: {self.mode!r} (attendu: {', '.join(MODES)})")
		get_activation(self.activation)
		get_error_function(self.loss)
		console_policy(self.console)

	# ==================== build_network =========================
	def build_network(self, input_width: int | None = None) -> Network:
		"""Construit le réseau décrit par la configuration."""
		self.validate()
		n_in = input_width if input_width is not None else self.input_width
		if n_in is None:
			raise ValueError("input_width inconnu: le fournir ou le déduire des données")
		return Network(
			self.depth,
			self.layer_widths(),
			n_in,
			self.eta,
			get_activation(self.activation),
			get_error_function(self.loss),
			activated_output=self.activated_output,
			seed=self.seed,
			weight_range=self.weight_range,
			bias_range=self.bias_range,
		)
