# ekstools

Building blocks for describing and preparing Amazon EKS clusters from Python.

- **Cluster configuration model** (`ekstools.api.types`, `ekstools.api.network`):
  `ClusterConfig`, `NodeGroup`, `ClusterMeta`, `ClusterVPC`, `ClusterSubnets`
  and related dataclasses, with defaults for region, Kubernetes version, node
  type, volume type and the VPC CIDR (`192.168.0.0/16`), plus subnet import
  and sufficiency checks.
- **Validation** (`ekstools.api.validation`): node group checks, covering
  Kubernetes label syntax, reserved `kubernetes.io` / `k8s.io` labels and
  conflicting IAM settings.
- **AMI resolution** (`ekstools.ami`): a built-in table of node images per
  Kubernetes version (`1.10`, `1.11`), image family (`AmazonLinux2`,
  `Ubuntu1804`) and region; GPU-aware static resolvers; and an
  `AutoResolver` that asks EC2 for the newest matching public image.
- **Availability zone selection** (`ekstools.az`): pick the recommended (3)
  or minimum (2) number of zones of a region at random, skipping zones to
  avoid.
- **aws-auth ConfigMap editing** (`ekstools.authconfigmap`): add and remove
  IAM role mappings (`mapRoles`) and accounts (`mapAccounts`), then save
  through a client you provide.

## Installation

```
pip install ekstools
```

For running the tests:

```
pip install "ekstools[test]"
pytest
```

## Cluster configuration

```python
from ekstools.api.types import new_cluster_config

cfg = new_cluster_config()          # version 1.11, default VPC, no node groups
cfg.metadata.name = "demo"
cfg.metadata.region = "us-west-2"
print(cfg.metadata)                 # demo.us-west-2.eksctl.io

ng = cfg.new_node_group()           # m5.large, gp2, shared and local security groups
ng.name = "ng-1"
print(ng.label_selector())          # alpha.eksctl.io/nodegroup-name=ng-1
```

Subnets are recorded per availability zone and topology (`SubnetTopology.PRIVATE`
or `SubnetTopology.PUBLIC`, or the strings `"Private"` / `"Public"`):

```python
cfg.import_subnet("Public", "us-west-2a", "subnet-1", "192.168.0.0/19")
cfg.import_subnet("Public", "us-west-2b", "subnet-2", "192.168.32.0/19")
cfg.check_sufficient_subnets()      # raises InsufficientSubnetsError if too few
```

Importing a different subnet ID or CIDR for a zone that already has one raises
`ekstools.api.network.SubnetMismatchError`.

## Validation

```python
from ekstools.api.validation import validate_node_group, ValidationError

try:
    validate_node_group(0, ng)
except ValidationError as err:
    print(err)
```

## Resolving node images

```python
from ekstools.ami.resolvers import resolve

resolve("us-west-2", "1.10", "t2.medium", "AmazonLinux2")
# 'ami-0e7ee8863c8536cce'
```

GPU instance types (`p2.*`, `p3.*`) get GPU images. When no image exists for
the combination, `ekstools.ami.errors.FailedResolutionError` is raised.

To look up the newest image through EC2 instead, pass any object with a
`describe_images(**kwargs)` method returning a dict with an `"Images"` list
(for example a boto3 EC2 client) to `AutoResolver`. It returns an empty string
when nothing matches and raises `ekstools.ami.search.ImageQueryError` when the
query fails:

```python
from ekstools.ami.resolvers import AutoResolver

AutoResolver(ec2_client).resolve("eu-west-1", "1.11", "m5.large", "AmazonLinux2")
```

`ekstools.ami.search` also offers `find_image(ec2, name_pattern)` and
`is_available(ec2, image_id)`.

## Choosing availability zones

```python
from ekstools.az import AvailabilityZoneSelector

zones = AvailabilityZoneSelector.with_defaults(ec2_client).select_zones("us-east-1")
```

The client needs a `describe_availability_zones(**kwargs)` method. When fewer
zones are usable than required, zones are repeated; a failing query raises
`ekstools.az.ZoneLookupError`.

## Editing the aws-auth ConfigMap

```python
from ekstools.authconfigmap import AuthConfigMap

acm = AuthConfigMap.from_client(configmap_client)
acm.add_role(
    "arn:aws:iam::000000000000:role/node-role",
    "system:node:{{EC2PrivateDNSName}}",
    ["system:bootstrappers", "system:nodes"],
)
acm.add_account("000000000000")
acm.save()
```

The client needs `get(name)`, `create(cm)` and `update(cm)` methods working
with `ekstools.authconfigmap.ConfigMap`; `get` raises
`ConfigMapNotFoundError` when the map does not exist yet. `save()` creates the
map when it has no UID and updates it otherwise. `add_node_group(client, ng)`
and `remove_node_group(client, ng)` do the whole fetch, edit and save for a
node group's instance role. Failures raise `AuthConfigMapError`.

## What this package does not do

There is no command-line tool, and nothing here creates, scales or deletes
clusters or node groups. The package talks to no AWS or Kubernetes API on its
own: EC2 and ConfigMap access go through client objects you pass in. The
built-in image table is fixed and is not refreshed from EC2.