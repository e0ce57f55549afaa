"""This module contains the default configuration of the primer and the functions to read and check config files."""
# pylint: disable=import-error
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # type: ignore

from epi_networks import communities, metrics

logger = logging.getLogger(__name__)

Config = Dict[str, Any]

DEFAULT_CONFIG: Config = {
    "seed": 2020,
    "palette": "YlOrRd",
    "reverse_palette": False,
    "layout": "spring",
    "figure": {"width": 6.0, "height": 6.0, "dpi": 100},
    "top": 5,
    "chapters": ["construction", "models", "degree", "centrality", "communities"],
    "metrics": ["degree", "betweenness", "closeness", "eigenvector"],
    "clustering": ["fast_greedy", "edge_betweenness", "infomap"],
    "graphs": {
        # a household of four where the youngest only meets one sibling
        "adjacency": {
            "matrix": [
                [0, 1, 1, 0],
                [1, 0, 1, 0],
                [1, 1, 0, 1],
                [0, 0, 1, 0],
            ],
            "mode": "undirected",
            "weighted": False,
        },
        # who infected whom
        "edgelist": {
            "edges": [[1, 2], [1, 3], [2, 4], [2, 5], [3, 6], [6, 7]],
            "directed": True,
        },
        "empty": {"n": 10},
        "full": {"n": 10},
        "random": {"n": 50, "p": 0.05},
        "preferential": {"n": 50, "m": 1},
        "small_world": {"size": 50, "nei": 2, "p": 0.05},
    },
}

# Graphs whose config keys are checked. Each key maps to the parameters it accepts.
GRAPH_PARAMETERS = {
    "adjacency": {"matrix", "mode", "weighted", "diag"},
    "edgelist": {"edges", "directed", "n"},
    "empty": {"n", "directed"},
    "full": {"n", "directed", "loops"},
    "random": {"n", "p", "m", "directed"},
    "preferential": {"n", "m"},
    "small_world": {"size", "nei", "p"},
}

# Parameters that exclude each other: setting one in a file drops the default of the other
EXCLUSIVE_PARAMETERS = {
    "random": ("p", "m"),
}


def _merge(base: Config, override: Config, path: str = "") -> Config:
    """Recursively merges override on top of base, returning a new dictionary. Nested dictionaries are merged, any
    other value (including lists) is replaced. Keys inside a graph block are not checked here, `check_config` does it
    against `GRAPH_PARAMETERS`.

    :param base: the configuration used as a starting point
    :param override: values to be replaced in base
    :param path: dotted path of the current key, used in error messages
    :return: the merged configuration
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if key not in base and path.count(".") != 2:
            raise ValueError(f"Unknown configuration key: {path}{key}")
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            merged[key] = _merge(base[key], value, f"{path}{key}.")
        else:
            merged[key] = value
    return merged


def _drop_replaced_alternatives(config: Config, graphs: Config):
    """When a graph block in the file sets only one of a pair of exclusive parameters, the default value of the other
    one is dropped, so that e.g. `random: {m: 40}` builds a G(n, m) graph."""
    if not isinstance(graphs, dict):
        return
    for name, (first, second) in EXCLUSIVE_PARAMETERS.items():
        given = graphs.get(name) or {}
        if not isinstance(given, dict) or name not in config["graphs"]:
            continue
        if first in given and second not in given:
            config["graphs"][name].pop(second, None)
        elif second in given and first not in given:
            config["graphs"][name].pop(first, None)


def check_config(config: Config) -> Config:
    """Check the consistency of a merged configuration.

    :param config: configuration, as returned by `load_config`
    :return: config
    """
    for name, parameters in config["graphs"].items():
        unknown = set(parameters) - GRAPH_PARAMETERS[name]
        if unknown:
            raise ValueError(f"Unknown parameters for graph {name}: {sorted(unknown)}")
    for key in ("chapters", "metrics", "clustering"):
        if not isinstance(config[key], list):
            raise ValueError(f"{key} must be a list, got {config[key]!r}")
        duplicates = sorted({name for name in config[key] if config[key].count(name) > 1})
        if duplicates:
            raise ValueError(f"{key} lists {duplicates} more than once")
    for name in config["metrics"]:
        if name not in metrics.METRICS:
            raise ValueError(f"Unknown metric {name!r}, expected one of {sorted(metrics.METRICS)}")
    for name in config["clustering"]:
        if name not in communities.ALGORITHMS:
            raise ValueError(f"Unknown clustering algorithm {name!r}, expected one of {sorted(communities.ALGORITHMS)}")
    if int(config["top"]) < 1:
        raise ValueError(f"top must be a positive number, got {config['top']}")
    for key in ("width", "height", "dpi"):
        if float(config["figure"][key]) <= 0:
            raise ValueError(f"figure.{key} must be positive, got {config['figure'][key]}")
    return config


def load_config(path: Optional[Union[str, Path]] = None, seed: Optional[int] = None) -> Config:
    """Read a YAML configuration file and merge it over the defaults.

    Graph blocks replace the parameters they name only, so a file containing just::

        graphs:
          random:
            n: 100

    keeps every other default, including the random graph's edge probability.
    Setting only `m` for the random graph drops the default `p` (and the other way round), since only one of them can
    be given.

    :param path: YAML file to read. If None, the defaults are used as they are
    :param seed: if set, overrides the seed found in the configuration
    :return: the checked configuration
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is not None:
        with open(path) as fp:
            loaded = yaml.safe_load(fp) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"{path} must contain a mapping, not {type(loaded).__name__}")
        logger.info("Read configuration from %s", path)
        config = _merge(config, loaded)
        _drop_replaced_alternatives(config, loaded.get("graphs") or {})
    if seed is not None:
        config["seed"] = seed
    return check_config(config)
