"""Neural network phenotypes for NEAT: nodes, links, traits, activation, fast solvers and graph export."""

__version__ = "0.1.0"