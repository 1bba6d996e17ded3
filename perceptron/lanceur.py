"""lanceur

Rôle
	Point d'entrée en ligne de commande.

	Ce module orchestre :
		- la lecture du fichier d'apprentissage (via `loader.py`)
		- la construction du réseau (via `config.TrainingConfig`)
		- la boucle d'époques (en ligne: un cycle par exemple, ou par lot moyenné)
		- l'affichage (via `console.Console`) et une prédiction optionnelle

Usage
	perceptron data.txt --depth 1 --eta 0.01 --epochs 100 --predict 5
	python -m perceptron.lanceur data.txt --depth 3 --width 4 3 --activation relu

Les valeurs par défaut viennent de l'environnement (voir `config.py`).
"""

from __future__ import annotations

import argparse
import random
from typing import List, Sequence

from .config import MODES, TrainingConfig
from .console import Console, fmt_nombre, fmt_vecteur
from .fct_activation import ACTIVATIONS
from .fct_erreur import ERROR_FUNCTIONS
from .loader import load_samples
from .reseau import Network


# ==================== build_parser =========================
def build_parser(defaults: TrainingConfig) -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="perceptron",
		description="Entraîne un perceptron multicouche (rétropropagation) sur un fichier délimité.",
	)
	parser.add_argument("fichier", help="fichier d'apprentissage: entrées puis cible sur chaque ligne")
	parser.add_argument("--depth", type=int, default=defaults.depth, help="nombre total de couches")
	parser.add_argument(
		"--width",
		type=int,
		nargs="+",
		default=defaults.widths,
		help="largeur(s) des couches (une valeur = largeur uniforme)",
	)
	parser.add_argument("--n_in", type=int, default=defaults.input_width, help="nombre d'entrées par ligne")
	parser.add_argument("--eta", type=float, default=defaults.eta, help="taux d'apprentissage")
	parser.add_argument("--activation", default=defaults.activation, help=f"{', '.join(ACTIVATIONS)} ou n_fct")
	parser.add_argument("--loss", choices=sorted(ERROR_FUNCTIONS), default=defaults.loss)
	parser.add_argument("--epochs", type=int, default=defaults.epochs)
	parser.add_argument("--mode", choices=MODES, default=defaults.mode)
	parser.add_argument("--seed", type=int, default=defaults.seed)
	parser.add_argument(
		"--activated_output",
		action=argparse.BooleanOptionalAction,
		default=defaults.activated_output,
		help="la sortie applique l'activation (--no-activated_output: sortie brute)",
	)
	parser.add_argument(
		"--shuffle",
		action=argparse.BooleanOptionalAction,
		default=defaults.shuffle,
		help="mélange des exemples à chaque époque",
	)
	parser.add_argument("--console", default=defaults.console, help="silencieux / minimal / détaillé")
	parser.add_argument("--predict", type=float, nargs="+", default=None, help="entrées à prédire après l'apprentissage")
	return parser


def _config_from_args(args: argparse.Namespace, defaults: TrainingConfig) -> TrainingConfig:
	return TrainingConfig(
		depth=args.depth,
		widths=list(args.width),
		input_width=args.n_in,
		eta=args.eta,
		activation=args.activation,
		loss=args.loss,
		epochs=args.epochs,
		mode=args.mode,
		seed=args.seed,
		weight_range=defaults.weight_range,
		bias_range=defaults.bias_range,
		activated_output=args.activated_output,
		shuffle=args.shuffle,
		console=args.console,
	)


# ==================== train =========================
def train(
	network: Network,
	X_list: Sequence[Sequence[float]],
	targets: Sequence[float],
	config: TrainingConfig,
	console: Console,
) -> List[float]:
	"""Boucle d'époques. Retourne l'erreur quadratique moyenne après chaque époque."""
	rng = random.Random(config.seed)
	order = list(range(len(X_list)))
	history: List[float] = []
	for epoch in range(1, config.epochs + 1):
		if config.shuffle:
			rng.shuffle(order)
		X_epoch = [X_list[i] for i in order]
		T_epoch = [targets[i] for i in order]
		if config.mode == "batch":
			network.batch_train(X_epoch, T_epoch)
		else:
			network.iterations_train(X_epoch, T_epoch)
		mse = network.evaluate(X_list, targets)
		history.append(mse)
		console.epoch(epoch, config.epochs, mse, network)
	return history


# ==================== main =========================
def main(argv: Sequence[str] | None = None) -> int:
	defaults = TrainingConfig.from_env()
	args = build_parser(defaults).parse_args(argv)

	try:
		config = _config_from_args(args, defaults)
		config.validate()
		console = Console(config.console)

		n, X_list, targets = load_samples(args.fichier, n_in=config.input_width)
		if n == 0:
			raise ValueError(f"{args.fichier}: aucun exemple")
		network = config.build_network(input_width=len(X_list[0]))

		console.section("Paramètres")
		console.info(
			f"fichier={args.fichier} exemples={n} n_in={network.input_width} type={network.network_type.value} "
			f"profondeur={network.network_depth} largeurs={network.network_width} eta={fmt_nombre(config.eta)} "
			f"activation={network.activation} perte={config.loss} mode={config.mode} époques={config.epochs}"
		)
		console.info(f"mse initiale: {fmt_nombre(network.evaluate(X_list, targets))}")

		console.section("Apprentissage")
		history = train(network, X_list, targets, config, console)

		console.section("Résumé")
		if history:
			console.info(f"mse finale: {fmt_nombre(history[-1])}")
		console.reseau(network)

		if args.predict is not None:
			prediction = network.predict(args.predict)
			print(f"Prédiction {fmt_vecteur(args.predict)}: {fmt_nombre(prediction)}")
	except (ValueError, OSError) as exc:
		Console.erreur(f"Erreur: {exc}")
		return 2
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
