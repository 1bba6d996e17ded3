"""cycle

Rôle
	Rend explicite l'ordre d'un cycle d'apprentissage:

		IDLE --feedforward--> FORWARD_COMPLETE --backprop--> BACKWARD_COMPLETE
		  ^                                                        |
		  +------------------------ step_gradient -----------------+

	`Phase` est l'étiquette tenue par le réseau. `TrainingCycle` est une
	session à usage unique qui n'expose que la séquence légale
	`forward` -> `backward` -> `apply_gradient`.

Abandon
	En cas d'échec au milieu d'un cycle, le cache du réseau est incohérent.
	`abandon()` (ou la sortie en erreur d'un bloc `with`) remet le réseau à
	l'état IDLE.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Sequence

from .erreurs import IntermediateStateIncomplete

if TYPE_CHECKING:
	from .reseau import Network


class Phase(Enum):
	IDLE = "idle"
	FORWARD_COMPLETE = "forward"
	BACKWARD_COMPLETE = "backward"


class TrainingCycle:
	"""Un cycle (un exemple) sur un réseau donné."""

	# ==================== __init__ =========================
	def __init__(self, network: "Network"):
		if network.phase is not Phase.IDLE:
			raise IntermediateStateIncomplete(
				f"Un cycle est déjà en cours sur ce réseau (phase={network.phase.value}); appeler reset()."
			)
		self.network = network
		self.inputs: List[float] | None = None
		self.prediction: float | None = None
		self.final_error: float | None = None
		self.layer_errors: List[List[float]] = []
		self._etape = 0
		self.termine = False

	def _exige(self, etape: int, operation: str) -> None:
		if self.termine:
			raise IntermediateStateIncomplete(f"{operation}: cycle déjà terminé ou abandonné.")
		if self._etape != etape:
			raise IntermediateStateIncomplete(
				f"{operation}: appel hors ordre (ordre attendu: forward, backward, apply_gradient)."
			)

	# ==================== forward =========================
	def forward(self, inputs: Sequence[float]) -> float:
		self._exige(0, "forward")
		self.prediction = self.network.feedforward_compute(inputs)
		self.inputs = list(inputs)
		self._etape = 1
		return self.prediction

	# ==================== backward =========================
	def backward(self, final_error: float) -> List[List[float]]:
		"""Rétropropage un signal d'erreur de sortie déjà calculé."""
		self._exige(1, "backward")
		self.layer_errors = self.network.backpropagate_error(final_error)
		self.final_error = float(final_error)
		self._etape = 2
		return self.layer_errors

	def backward_target(self, target: float) -> List[List[float]]:
		"""Calcule l'erreur de sortie avec la fonction d'erreur du réseau, puis rétropropage."""
		self._exige(1, "backward")
		return self.backward(self.network.error_function(target, self.prediction))

	# ==================== apply_gradient =========================
	def apply_gradient(self) -> None:
		self._exige(2, "apply_gradient")
		self.network.step_gradient(self.inputs)
		self.termine = True

	def abandon(self) -> None:
		if not self.termine:
			self.network.reset()
			self.termine = True

	def __enter__(self) -> "TrainingCycle":
		return self

	def __exit__(self, exc_type, exc, tb) -> bool:
		if exc_type is not None:
			self.abandon()
		return False
