"""erreurs

Rôle
	Taxonomie des erreurs levées par le cœur numérique (neurone, couche, réseau).

Convention
	Toutes les erreurs dérivent de `NetworkError`, elle-même une `ValueError`,
	afin de rester compatibles avec le reste du projet qui valide ses entrées
	avec `ValueError`.

	Aucune erreur n'est interceptée à l'intérieur du cœur : un échec laisse le
	cycle courant incohérent, l'appelant doit l'abandonner via `Network.reset()`.
"""

from __future__ import annotations


class NetworkError(ValueError):
	"""Erreur de base du réseau."""


class InputWidthMismatch(NetworkError):
	"""La taille du vecteur d'entrée ne correspond pas à la largeur configurée."""

	def __init__(self, recu: int, attendu: int, quoi: str = "entrée"):
		self.recu = int(recu)
		self.attendu = int(attendu)
		super().__init__(
			f"Taille de {quoi} invalide: reçu {self.recu} valeur(s), attendu {self.attendu}."
		)


class IntermediateStateIncomplete(NetworkError):
	"""Phase appelée hors ordre ou avec un cache de propagation avant incohérent."""


class TopologyConfigurationInvalid(NetworkError):
	"""Profondeur, liste de largeurs ou indices de couches incompatibles."""


class WeightsIncomplete(TopologyConfigurationInvalid):
	"""Les poids (ou erreurs) de la couche suivante ne couvrent pas cette couche."""


class EmptyNeuronList(NetworkError):
	"""Accès au neurone d'une couche vide (couche d'entrée fictive)."""
