"""Cluster configuration types: clusters, node groups and their defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Union

from ekstools.api.network import (
    ClusterSubnets,
    ClusterVPC,
    Network,
    SubnetTopology,
    default_cidr,
)

GROUP_NAME = "eksctl.io"
CURRENT_GROUP_VERSION = "v1alpha4"
CLUSTER_CONFIG_KIND = "ClusterConfig"
SCHEME_GROUP_VERSION = f"{GROUP_NAME}/{CURRENT_GROUP_VERSION}"

AWS_DEBUG_LEVEL = 5

REGION_US_WEST_2 = "us-west-2"
REGION_US_EAST_1 = "us-east-1"
REGION_US_EAST_2 = "us-east-2"
REGION_EU_WEST_1 = "eu-west-1"
REGION_EU_WEST_2 = "eu-west-2"
REGION_EU_WEST_3 = "eu-west-3"
REGION_EU_NORTH_1 = "eu-north-1"
REGION_EU_CENTRAL_1 = "eu-central-1"
REGION_AP_NORTHEAST_1 = "ap-northeast-1"
REGION_AP_NORTHEAST_2 = "ap-northeast-2"
REGION_AP_SOUTHEAST_1 = "ap-southeast-1"
REGION_AP_SOUTHEAST_2 = "ap-southeast-2"
REGION_AP_SOUTH_1 = "ap-south-1"

DEFAULT_REGION = REGION_US_WEST_2

VERSION_1_10 = "1.10"
VERSION_1_11 = "1.11"
LATEST_VERSION = VERSION_1_11

DEFAULT_NODE_TYPE = "m5.large"
DEFAULT_NODE_COUNT = 2

NODE_VOLUME_TYPE_GP2 = "gp2"
NODE_VOLUME_TYPE_IO1 = "io1"
NODE_VOLUME_TYPE_SC1 = "sc1"
NODE_VOLUME_TYPE_ST1 = "st1"
DEFAULT_NODE_VOLUME_TYPE = NODE_VOLUME_TYPE_GP2

CLUSTER_NAME_TAG = "eksctl.cluster.k8s.io/v1alpha1/cluster-name"
NODE_GROUP_NAME_TAG = "eksctl.io/v1alpha2/nodegroup-name"
OLD_NODE_GROUP_ID_TAG = "eksctl.cluster.k8s.io/v1alpha1/nodegroup-id"
CLUSTER_NAME_LABEL = "alpha.eksctl.io/cluster-name"
NODE_GROUP_NAME_LABEL = "alpha.eksctl.io/nodegroup-name"

DEFAULT_WAIT_TIMEOUT = timedelta(minutes=25)

MIN_REQUIRED_SUBNETS = 2
RECOMMENDED_SUBNETS = 3


class InsufficientSubnetsError(ValueError):
    """Too few subnets are available to create a cluster."""

    def __init__(self) -> None:
        super().__init__(
            f"inssuficient number of subnets, at least {MIN_REQUIRED_SUBNETS}x public "
            f"and/or {MIN_REQUIRED_SUBNETS}x private subnets are required"
        )


@dataclass(frozen=True)
class GroupKind:
    """A kind qualified by its API group."""

    group: str
    kind: str


@dataclass(frozen=True)
class GroupResource:
    """A resource qualified by its API group."""

    group: str
    resource: str


def kind(kind: str) -> GroupKind:
    """Qualify a kind with this API's group."""
    return GroupKind(group=GROUP_NAME, kind=kind)


def resource(resource: str) -> GroupResource:
    """Qualify a resource with this API's group."""
    return GroupResource(group=GROUP_NAME, resource=resource)


def supported_regions() -> list[str]:
    """Regions where EKS is available."""
    return [
        REGION_US_WEST_2,
        REGION_US_EAST_1,
        REGION_US_EAST_2,
        REGION_EU_WEST_1,
        REGION_EU_WEST_2,
        REGION_EU_WEST_3,
        REGION_EU_NORTH_1,
        REGION_EU_CENTRAL_1,
        REGION_AP_NORTHEAST_1,
        REGION_AP_NORTHEAST_2,
        REGION_AP_SOUTHEAST_1,
        REGION_AP_SOUTHEAST_2,
        REGION_AP_SOUTH_1,
    ]


def supported_versions() -> list[str]:
    """Kubernetes versions that EKS supports."""
    return [VERSION_1_10, VERSION_1_11]


def supported_node_volume_types() -> list[str]:
    """Volume types usable for a node's root volume."""
    return [
        NODE_VOLUME_TYPE_GP2,
        NODE_VOLUME_TYPE_IO1,
        NODE_VOLUME_TYPE_SC1,
        NODE_VOLUME_TYPE_ST1,
    ]


@dataclass
class TypeMeta:
    """Kind and API version of an object."""

    kind: str = ""
    api_version: str = ""


def cluster_config_type_meta() -> TypeMeta:
    """Type metadata for a ClusterConfig."""
    return TypeMeta(kind=CLUSTER_CONFIG_KIND, api_version=SCHEME_GROUP_VERSION)


@dataclass
class ClusterMeta:
    """What identifies a cluster."""

    name: str = ""
    region: str = ""
    version: str = ""
    tags: dict[str, str] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.name}.{self.region}.eksctl.io"

    def log_string(self) -> str:
        """Representation of the cluster for log messages."""
        return f'EKS cluster "{self.name}" in "{self.region}" region'


@dataclass
class ClusterStatus:
    """Read-only attributes of a cluster."""

    endpoint: str = ""
    certificate_authority_data: bytes = b""
    arn: str = ""
    stack_name: str = ""


@dataclass
class ClusterIAM:
    """IAM attributes of a cluster."""

    service_role_arn: str = ""


@dataclass
class ProviderConfig:
    """Global parameters for all interactions with AWS APIs."""

    cloud_formation_role_arn: str = ""
    region: str = ""
    profile: str = ""
    wait_timeout: timedelta = DEFAULT_WAIT_TIMEOUT


@dataclass
class NodeGroupSGs:
    """Security group attributes of a node group."""

    attach_ids: list[str] = field(default_factory=list)
    with_shared: Optional[bool] = None
    with_local: Optional[bool] = None


@dataclass
class NodeGroupIAMAddonPolicies:
    """Optional IAM add-on policies of a node group."""

    image_builder: Optional[bool] = None
    auto_scaler: Optional[bool] = None
    external_dns: Optional[bool] = None


@dataclass
class NodeGroupIAM:
    """IAM attributes of a node group."""

    attach_policy_arns: list[str] = field(default_factory=list)
    instance_profile_arn: str = ""
    instance_role_arn: str = ""
    instance_role_name: str = ""
    with_addon_policies: NodeGroupIAMAddonPolicies = field(
        default_factory=NodeGroupIAMAddonPolicies
    )


@dataclass
class NodeGroup:
    """Configuration attributes specific to a node group."""

    name: str = ""
    ami: str = ""
    ami_family: str = ""
    instance_type: str = ""
    availability_zones: list[str] = field(default_factory=list)
    tags: dict[str, str] = field(default_factory=dict)
    private_networking: bool = False
    security_groups: Optional[NodeGroupSGs] = None
    desired_capacity: Optional[int] = None
    min_size: Optional[int] = None
    max_size: Optional[int] = None
    volume_size: int = 0
    volume_type: str = ""
    max_pods_per_node: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    allow_ssh: bool = False
    ssh_public_key_path: str = ""
    ssh_public_key: bytes = b""
    ssh_public_key_name: str = ""
    iam: Optional[NodeGroupIAM] = None
    pre_bootstrap_commands: list[str] = field(default_factory=list)
    override_bootstrap_command: Optional[str] = None
    cluster_dns: str = ""

    def label_selector(self) -> str:
        """Kubernetes label selector matching this node group's nodes."""
        return f"{NODE_GROUP_NAME_LABEL}={self.name}"


def new_cluster_vpc() -> ClusterVPC:
    """A VPC configuration using the default global CIDR."""
    return ClusterVPC(network=Network(cidr=default_cidr()))


@dataclass
class ClusterConfig:
    """Full configuration of a cluster."""

    type_meta: TypeMeta = field(default_factory=TypeMeta)
    metadata: Optional[ClusterMeta] = None
    iam: ClusterIAM = field(default_factory=ClusterIAM)
    vpc: Optional[ClusterVPC] = None
    node_groups: list[NodeGroup] = field(default_factory=list)
    availability_zones: list[str] = field(default_factory=list)
    status: Optional[ClusterStatus] = None

    def append_availability_zone(self, new_az: str) -> None:
        """Add an availability zone unless it is already present."""
        if new_az not in self.availability_zones:
            self.availability_zones.append(new_az)

    def new_node_group(self) -> NodeGroup:
        """Create a node group with default settings and add it to the cluster."""
        ng = NodeGroup(
            private_networking=False,
            security_groups=NodeGroupSGs(attach_ids=[], with_local=True, with_shared=True),
            desired_capacity=None,
            instance_type=DEFAULT_NODE_TYPE,
            volume_size=0,
            volume_type=DEFAULT_NODE_VOLUME_TYPE,
            iam=NodeGroupIAM(
                with_addon_policies=NodeGroupIAMAddonPolicies(
                    image_builder=False,
                    auto_scaler=False,
                    external_dns=False,
                )
            ),
        )
        self.node_groups.append(ng)
        return ng

    def _subnets(self) -> Optional[ClusterSubnets]:
        return self.vpc.subnets if self.vpc is not None else None

    def private_subnet_ids(self) -> list[str]:
        """IDs of the private subnets."""
        subnets = self._subnets()
        return subnets.private_ids() if subnets is not None else []

    def public_subnet_ids(self) -> list[str]:
        """IDs of the public subnets."""
        subnets = self._subnets()
        return subnets.public_ids() if subnets is not None else []

    def import_subnet(
        self,
        topology: Union[SubnetTopology, str],
        az: str,
        subnet_id: str,
        cidr: str,
    ) -> None:
        """Load a subnet into the configuration."""
        if self.vpc is None:
            self.vpc = new_cluster_vpc()
        if self.vpc.subnets is None:
            self.vpc.subnets = ClusterSubnets()
        self.vpc.subnets.import_subnet(topology, az, subnet_id, cidr)

    def has_sufficient_private_subnets(self) -> bool:
        """Whether enough private subnets exist to create a cluster."""
        return len(self.private_subnet_ids()) >= MIN_REQUIRED_SUBNETS

    def has_sufficient_public_subnets(self) -> bool:
        """Whether enough public subnets exist to create a cluster."""
        return len(self.public_subnet_ids()) >= MIN_REQUIRED_SUBNETS

    def check_sufficient_subnets(self) -> None:
        """Raise InsufficientSubnetsError unless the subnets suffice.

        Public-only and private-only layouts are allowed, but whichever kind
        is present must have at least the minimum number of subnets.
        """
        num_public = len(self.public_subnet_ids())
        if 0 < num_public < MIN_REQUIRED_SUBNETS:
            raise InsufficientSubnetsError()

        num_private = len(self.private_subnet_ids())
        if 0 < num_private < MIN_REQUIRED_SUBNETS:
            raise InsufficientSubnetsError()

        if num_public == 0 and num_private == 0:
            raise InsufficientSubnetsError()


def new_cluster_config() -> ClusterConfig:
    """A cluster configuration with defaults and no node groups."""
    return ClusterConfig(
        type_meta=cluster_config_type_meta(),
        metadata=ClusterMeta(version=LATEST_VERSION),
        vpc=new_cluster_vpc(),
    )