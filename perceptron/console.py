"""console

Rôle
	Tout ce qui s'imprime: formatage des nombres, politique d'affichage
	(silencieux / minimal / détaillé) et vue lisible d'un réseau.

Affichage d'un réseau (style affectations)
	Pour chaque couche traversée c (1..L):
		w{i}{j}_{c} = poids de l'entrée i vers le neurone j
		b{j}_{c}    = biais du neurone j
		e{j}_{c}    = signal d'erreur en cache ("-" s'il n'a jamais été calculé)

	Format de diagnostic uniquement, il n'est pas destiné à être relu.
"""

from __future__ import annotations

import sys
import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Sequence, TextIO

if TYPE_CHECKING:
	from .reseau import Network


# ==================== fmt_nombre =========================
def fmt_nombre(x: float, precision: int = 6) -> str:
	"""Formate un nombre pour l'affichage (entiers propres, petits zéros, précision)."""
	try:
		xf = float(x)
	except (TypeError, ValueError):
		return str(x)
	if xf != xf or xf in (float("inf"), float("-inf")):
		return str(xf)
	if abs(xf) < 1e-15:
		xf = 0.0
	if abs(xf) < 1e15 and abs(xf - round(xf)) < 1e-12:
		return str(int(round(xf)))
	return format(xf, f".{int(precision)}g")


def fmt_vecteur(v: Sequence[float], precision: int = 6) -> str:
	"""Formate un vecteur sous la forme: [v1, v2, ...]."""
	return "[" + ", ".join(fmt_nombre(x, precision) for x in v) + "]"


def _assign(names: List[str], values: List[str], indent: str = "\t") -> str:
	"""Ligne d'affectation du style: w11_1, w21_1 = 3, 4"""
	return f"{indent}{', '.join(names)} = {', '.join(values)}"


# ==================== affiche_reseau =========================
def affiche_reseau(network: "Network", precision: int = 6) -> str:
	"""Retourne la vue lisible des poids/biais/erreurs d'un réseau."""
	lines = [
		f"--- Réseau {network.network_type.value} (profondeur={network.network_depth}, "
		f"n_in={network.input_width}, eta={fmt_nombre(network.learning_rate, precision)}, "
		f"activation={network.activation}) ---"
	]
	for c, layer in enumerate(network.active_layers, start=1):
		titre = "sortie" if layer is network.output_layer else "cachée"
		lines.append(f"# couche {c} ({titre}, {layer.width} neurone(s))")
		for j, neuron in enumerate(layer.neurons, start=1):
			w_names = [f"w{i}{j}_{c}" for i in range(1, neuron.input_width + 1)]
			lines.append(_assign(w_names, [fmt_nombre(w, precision) for w in neuron.weights]))
		for j, neuron in enumerate(layer.neurons, start=1):
			lines.append(_assign([f"b{j}_{c}"], [fmt_nombre(neuron.bias, precision)]))
		for j, neuron in enumerate(layer.neurons, start=1):
			erreur = "-" if neuron.current_error is None else fmt_nombre(neuron.current_error, precision)
			lines.append(_assign([f"e{j}_{c}"], [erreur]))
	return "\n".join(lines)


@dataclass(frozen=True)
class ConsolePolicy:
	"""Politique d'affichage console.

	Centralise le niveau d'affichage au lieu d'avoir des flags éparpillés.
	"""

	niveau: str
	show_sections: bool
	show_epochs: bool
	show_network: bool


def _normalize_console_level(value: object) -> str:
	"""Normalise un niveau de log console (lower + sans accents)."""
	s = str(value or "").strip().lower()
	s = unicodedata.normalize("NFKD", s)
	return "".join(ch for ch in s if not unicodedata.combining(ch))


# ==================== console_policy =========================
def console_policy(level: str) -> ConsolePolicy:
	lvl = _normalize_console_level(level)
	if lvl in {"silencieux", "silent", "quiet", "q", "s"}:
		return ConsolePolicy(niveau="silencieux", show_sections=False, show_epochs=False, show_network=False)
	if lvl in {"min", "minimal", "mini", "m"}:
		return ConsolePolicy(niveau="minimal", show_sections=True, show_epochs=True, show_network=False)
	if lvl in {"detail", "detaille", "detaile", "d", "detailed"}:
		return ConsolePolicy(niveau="detaille", show_sections=True, show_epochs=True, show_network=True)
	raise ValueError(f"log_console invalide: '{level}' (attendu: silencieux/minimal/détaillé)")


class Console:
	"""Sortie console filtrée par la politique."""

	def __init__(self, level: str = "minimal", stream: TextIO | None = None):
		self.policy = console_policy(level)
		self.stream = stream if stream is not None else sys.stdout

	def _print(self, text: str) -> None:
		print(text, file=self.stream)

	def section(self, title: str) -> None:
		if self.policy.show_sections:
			self._print(f"\n--- {title} ---")

	def info(self, text: str) -> None:
		if self.policy.show_sections:
			self._print(text)

	# ==================== epoch =========================
	def epoch(self, index: int, total: int, mse: float, network: "Network | None" = None) -> None:
		"""Résumé d'une époque; en mode détaillé, ajoute l'état du réseau."""
		if not self.policy.show_epochs:
			return
		self._print(f"Époque {index:0{len(str(total))}d}/{total} - mse: {fmt_nombre(mse)}")
		if network is not None and self.policy.show_network:
			self._print(affiche_reseau(network))

	def reseau(self, network: "Network") -> None:
		if self.policy.show_network:
			self._print(affiche_reseau(network))

	@staticmethod
	def erreur(text: str) -> None:
		"""Toujours affichée (sur stderr), quel que soit le niveau."""
		print(text, file=sys.stderr)
