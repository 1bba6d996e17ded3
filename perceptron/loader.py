"""loader

Rôle
	Lecture des fichiers d'apprentissage numériques délimités.

Format
	Une ligne non vide = un exemple, `#` = commentaire.
	Séparateur: virgule si la ligne en contient une, sinon espaces.
		1.0 2.0 5.0
		1.0,2.0,5.0
	Les `n_in` premières colonnes sont les entrées, la colonne `n_in` est la
	cible. Sans `n_in`, toutes les colonnes sauf la dernière sont des entrées.
"""

from __future__ import annotations

import random
from collections.abc import Iterator
from pathlib import Path


def _split_line(line: str) -> list[str]:
	if "," in line:
		return [t.strip() for t in line.split(",") if t.strip()]
	return line.split()


# ==================== parse_sample_line =========================
def parse_sample_line(
	line: str,
	*,
	n_in: int | None = None,
	line_number: int | None = None,
) -> tuple[list[float], float] | None:
	"""Parse une ligne -> (Xn, cible), ou None si la ligne est vide/commentaire."""
	s = (line or "").split("#", 1)[0].strip()
	if not s:
		return None
	where = f"ligne {line_number}" if line_number is not None else "ligne"

	tokens = _split_line(s)
	try:
		values = [float(t) for t in tokens]
	except ValueError as exc:
		raise ValueError(f"{where}: valeur non numérique: {s[:80]!r}") from exc

	use_n_in = len(values) - 1 if n_in is None else int(n_in)
	if use_n_in < 1:
		raise ValueError(f"{where}: au moins une entrée et une cible sont requises: {s[:80]!r}")
	if len(values) < use_n_in + 1:
		raise ValueError(f"{where}: {len(values)} colonne(s), attendu >= {use_n_in + 1} (n_in={use_n_in} + cible)")
	return values[:use_n_in], values[use_n_in]


def iter_samples(file_path: str | Path, *, n_in: int | None = None) -> Iterator[tuple[list[float], float]]:
	"""Itère sur les exemples (Xn, cible) d'un fichier."""
	with open(file_path, "r", encoding="utf-8") as f:
		for line_number, raw_line in enumerate(f, start=1):
			parsed = parse_sample_line(raw_line, n_in=n_in, line_number=line_number)
			if parsed is not None:
				yield parsed


# ==================== load_samples =========================
def load_samples(file_path: str | Path, *, n_in: int | None = None) -> tuple[int, list[list[float]], list[float]]:
	"""Lit séquentiellement le fichier et retourne (n_lignes, X_list, cibles).

	Sans `n_in`, toutes les lignes doivent avoir le même nombre de colonnes.
	"""
	X_list: list[list[float]] = []
	targets: list[float] = []
	for Xn, target in iter_samples(file_path, n_in=n_in):
		if X_list and len(Xn) != len(X_list[0]):
			raise ValueError(
				f"{file_path}: exemple {len(X_list) + 1} avec {len(Xn)} entrée(s), attendu {len(X_list[0])}"
			)
		X_list.append(Xn)
		targets.append(target)
	return len(X_list), X_list, targets


def load_samples_random(
	file_path: str | Path,
	*,
	n_in: int | None = None,
	seed: int | None = None,
) -> tuple[int, list[list[float]], list[float]]:
	"""Mêmes données que `load_samples`, en ordre aléatoire (répétable avec seed)."""
	n, X_list, targets = load_samples(file_path, n_in=n_in)
	indices = list(range(n))
	random.Random(seed).shuffle(indices)
	return n, [X_list[i] for i in indices], [targets[i] for i in indices]
