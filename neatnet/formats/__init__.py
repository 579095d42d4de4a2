"""Export of network graphs as Cytoscape JSON and GraphViz DOT."""