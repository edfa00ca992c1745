"""Application services: prompt assembly, model invocation and the conversion pipeline."""
