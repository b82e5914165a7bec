"""Parameter normalisation, query synthesis and the list pipelines."""
