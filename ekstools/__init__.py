"""Cluster configuration, AMI resolution, zone selection and aws-auth editing for Amazon EKS."""

__version__ = "0.1.0"