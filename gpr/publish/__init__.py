"""Release publishing pipeline: classify, extract, merge, commit."""
