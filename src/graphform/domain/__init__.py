"""Domain layer: resource models, reconcilers and the convergence driver."""
