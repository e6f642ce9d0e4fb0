"""
Webapp Admission - validating admission control for webapp Deployments.

This package provides the admission gate for ``webapp.my.domain/v1``
Deployment resources with:
- Field-level validation rules that collect every violation
- A decision aggregator producing Kubernetes-style Invalid errors
- Create/update/delete lifecycle hooks served through Kopf
"""

__version__ = "0.1.0"
