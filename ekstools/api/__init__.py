"""Cluster configuration types, VPC networking and node group validation."""