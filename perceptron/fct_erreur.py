"""fct_erreur

Rôle
	Fonctions d'erreur: dérivée de la perte par rapport à la prédiction,
	appelée sous la forme `f(aim, final_answer)`.

	Le résultat sert directement de signal d'erreur du neurone de sortie
	(`Layer.set_final_layer_error`).

Perte de suivi
	`squared_loss` et `mean_squared_error` ne participent pas à l'apprentissage;
	elles servent à l'affichage de l'évolution par époque.
"""

from __future__ import annotations

from typing import Callable, Dict, Sequence


ErrorFunction = Callable[[float, float], float]


# ==================== squared_loss_prime =========================
def squared_loss_prime(aim: float, final_answer: float) -> float:
	"""Dérivée de (aim - y)^2 par rapport à y: -2 * (aim - y)."""
	return -2.0 * (aim - final_answer)


# ==================== half_squared_loss_prime =========================
def half_squared_loss_prime(aim: float, final_answer: float) -> float:
	"""Dérivée de 0.5 * (aim - y)^2: -(aim - y)."""
	return -(aim - final_answer)


# ==================== absolute_loss_prime =========================
def absolute_loss_prime(aim: float, final_answer: float) -> float:
	"""Dérivée de |y - aim| (0 à l'égalité)."""
	diff = final_answer - aim
	if diff > 0:
		return 1.0
	if diff < 0:
		return -1.0
	return 0.0


def squared_loss(aim: float, final_answer: float) -> float:
	diff = aim - final_answer
	return diff * diff


# ==================== mean_squared_error =========================
def mean_squared_error(targets: Sequence[float], predictions: Sequence[float]) -> float:
	"""Moyenne de (d - y)^2 sur tous les exemples."""
	if len(targets) != len(predictions):
		raise ValueError("targets et predictions doivent avoir la même taille")
	if not targets:
		raise ValueError("Aucun exemple pour calculer l'erreur quadratique moyenne")
	return sum(squared_loss(d, y) for d, y in zip(targets, predictions)) / len(targets)


ERROR_FUNCTIONS: Dict[str, ErrorFunction] = {
	"squared": squared_loss_prime,
	"half_squared": half_squared_loss_prime,
	"absolute": absolute_loss_prime,
}


def get_error_function(nom) -> ErrorFunction:
	"""Retourne la fonction d'erreur par nom (ou l'appelable tel quel)."""
	if callable(nom):
		return nom
	key = str(nom or "").strip().lower().replace("-", "_")
	if key not in ERROR_FUNCTIONS:
		raise ValueError(f"Fonction d'erreur inconnue: {nom!r} (choix: {', '.join(ERROR_FUNCTIONS)})")
	return ERROR_FUNCTIONS[key]
