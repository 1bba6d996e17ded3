r"""fct_activation

Rôle
	Fonctions d'activation (Fi) et dérivées (Fp) utilisées par les neurones.

Conventions
	- Les fonctions `*_et_derivative(i)` prennent une valeur scalaire `i`
	  (pré-activation) et retournent une paire `[Fi, Fp]`, directement
	  déballable: `Fi, Fp = ...`.
	- `ActivationFunction` regroupe une fonction et sa dérivée dans une valeur
	  immuable exposant `apply(i)` et `derivative(i)`. C'est ce qui est donné
	  au réseau à la construction.

Fonctions disponibles
	- `identity_et_derivative(i)` : $i$ et $1$
	- `relu_et_derivative(i)` : $\max(i, 0)$ et $\mathbb{1}_{i>0}$
	- `sigmoide_et_derivative(i)` : $\sigma(i)$ et $\sigma(i)\,(1-\sigma(i))$
	- `tanh_et_derivative(i)` : $\tanh(i)$ et $1-\tanh(i)^2$
	- `gelu_et_derivative(i)` : GELU (approx.) et dérivée (approx.)
	- `tan_et_derivative(i)` : $\tan(i)$ et $1/\cos(i)^2$

Notes numériques
	Les fonctions sont "brutes" (pas de clipping) : overflow et NaN se
	propagent tels quels. Les puissances sont écrites en produits (`i * i`):
	`**` sur un float lève OverflowError au lieu de donner inf. `tan` d'une
	entrée non finie retourne NaN.
"""

from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass
from typing import Callable, Dict, List, Union


ScalarFunction = Callable[[float], float]


def _sigmoid_stable(x: float) -> float:
	"""Sigmoïde sans overflow de exp() quand |x| est grand (mêmes valeurs)."""
	xf = float(x)
	if xf >= 0.0:
		z = math.exp(-xf)
		return 1.0 / (1.0 + z)
	z = math.exp(xf)
	return z / (1.0 + z)


# ==================== identity_et_derivative =========================
def identity_et_derivative(activation_i) -> List[float]:
	"""Identité: Fi = i, Fp = 1."""

	return [float(activation_i), 1.0]


# ==================== relu_et_derivative =========================
def relu_et_derivative(activation_i) -> List[float]:
	"""ReLU.

	Sortie:
		[Fi, Fp]
		- Fi = i si i > 0, sinon 0
		- Fp = 1 si i > 0, sinon 0
	"""

	i = float(activation_i)
	if i > 0.0:
		return [i, 1.0]
	return [0.0, 0.0]


# ==================== sigmoide_et_derivative =========================
def sigmoide_et_derivative(activation_i) -> List[float]:
	"""Calcule la sigmoïde et sa dérivée.

	Entrée:
		activation_i: valeur i (avant activation).

	Sortie:
		[Fi, Fp] (liste de deux floats)
		- Fi = 1 / (1 + exp(-i))
		- Fp = Fi * (1 - Fi)
	"""

	Fi = _sigmoid_stable(float(activation_i))
	Fp = Fi * (1.0 - Fi)
	return [Fi, Fp]


# ==================== tanh_et_derivative =========================
def tanh_et_derivative(activation_i) -> List[float]:
	"""Calcule tanh et sa dérivée (Fp = 1 - Fi^2)."""

	Fi = math.tanh(activation_i)
	Fp = 1 - Fi * Fi
	return [Fi, Fp]


# ==================== gelu_et_derivative =========================
def gelu_et_derivative(activation_i) -> List[float]:
	"""Calcule GELU (approximation tanh) et sa dérivée.

	Sortie:
		[Fi, Fp]
		- Fi = 0.5 * i * (1 + tanh( sqrt(2/pi) * (i + 0.044715 * i^3) ))
		- Fp = dérivée associée
	"""

	i = activation_i
	a = math.sqrt(2 / math.pi)

	tanh_val = math.tanh(a * (i + 0.044715 * i * i * i))
	Fi = 0.5 * i * (1 + tanh_val)

	sech2 = 1 - tanh_val * tanh_val
	Fp = 0.5 * (1 + tanh_val) + 0.5 * i * sech2 * (a * (1 + 3 * 0.044715 * i * i))
	return [Fi, Fp]


# ==================== tan_et_derivative =========================
def tan_et_derivative(activation_i) -> List[float]:
	"""Calcule tan et sa dérivée.

	Attention:
		tan(i) explose quand cos(i) est proche de 0.
	"""

	if not math.isfinite(activation_i):
		return [math.nan, math.nan]
	Fi = math.tan(activation_i)
	cos_i = math.cos(activation_i)
	Fp = 1 / (cos_i * cos_i)
	return [Fi, Fp]


@dataclass(frozen=True)
class ActivationFunction:
	"""Paire (fonction, dérivée) appliquée par chaque neurone.

	Les deux appelables doivent être purs: `Neuron.compute` n'a aucun effet de
	bord et s'appuie sur cette propriété.
	"""

	fonction: ScalarFunction
	derivee: ScalarFunction
	nom: str = "personnalisée"

	def apply(self, value: float) -> float:
		return float(self.fonction(value))

	def derivative(self, value: float) -> float:
		return float(self.derivee(value))

	# ==================== from_pair =========================
	@classmethod
	def from_pair(cls, fct_et_derivative: Callable[[float], List[float]], nom: str) -> "ActivationFunction":
		"""Construit la paire depuis une fonction `*_et_derivative` ([Fi, Fp])."""
		return cls(
			fonction=lambda i: fct_et_derivative(i)[0],
			derivee=lambda i: fct_et_derivative(i)[1],
			nom=nom,
		)

	def __str__(self) -> str:
		return self.nom


IDENTITY = ActivationFunction.from_pair(identity_et_derivative, "identity")
RELU = ActivationFunction.from_pair(relu_et_derivative, "relu")
SIGMOIDE = ActivationFunction.from_pair(sigmoide_et_derivative, "sigmoide")
TANH = ActivationFunction.from_pair(tanh_et_derivative, "tanh")
GELU = ActivationFunction.from_pair(gelu_et_derivative, "gelu")
TAN = ActivationFunction.from_pair(tan_et_derivative, "tan")

ACTIVATIONS: Dict[str, ActivationFunction] = {
	"identity": IDENTITY,
	"relu": RELU,
	"sigmoide": SIGMOIDE,
	"tanh": TANH,
	"gelu": GELU,
	"tan": TAN,
}

# Identifiants numériques historiques (n_fct)
N_FCT_TO_ACTIVATION: Dict[int, str] = {
	1: "sigmoide",
	2: "tan",
	3: "tanh",
	4: "gelu",
	5: "identity",
	6: "relu",
}

_SYNONYMES = {
	"identite": "identity",
	"lineaire": "identity",
	"linear": "identity",
	"sigmoid": "sigmoide",
}


def _normalize_activation(value: object) -> str:
	"""Normalise un libellé d'activation (lower + sans accents)."""
	s = str(value or "").strip().lower()
	s = unicodedata.normalize("NFKD", s)
	return "".join(ch for ch in s if not unicodedata.combining(ch))


# ==================== get_activation =========================
def get_activation(nom: Union[str, int, ActivationFunction]) -> ActivationFunction:
	"""Retourne l'activation demandée (nom, identifiant n_fct ou instance)."""
	if isinstance(nom, ActivationFunction):
		return nom
	if isinstance(nom, int) and not isinstance(nom, bool):
		if nom not in N_FCT_TO_ACTIVATION:
			raise ValueError(f"n_fct invalide: {nom} (attendu {sorted(N_FCT_TO_ACTIVATION)})")
		return ACTIVATIONS[N_FCT_TO_ACTIVATION[nom]]

	key = _normalize_activation(nom)
	if key.isdigit():
		return get_activation(int(key))
	key = _SYNONYMES.get(key, key)
	if key not in ACTIVATIONS:
		raise ValueError(f"Activation inconnue: {nom!r} (choix: {', '.join(ACTIVATIONS)})")
	return ACTIVATIONS[key]
