"""kube-stack: validate Kubernetes cluster address plans and render cloud stack templates."""

__version__ = "0.1.0"
