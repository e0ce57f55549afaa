"""
Epi networks is a primer on network analysis for epidemiology. It walks through building contact networks, measuring
how central each person (vertex) is to the spread of an infection and finding communities in those networks.

The graph algorithms themselves come from networkx (and igraph, for infomap). This package sequences them into chapters
(see `chapters`), colours the plots by joining metric values against a palette (see `colours`) and renders the
resulting document (see `report`). The entrypoint is `primer`.
"""
