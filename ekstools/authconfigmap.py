"""Editing of the cluster auth ConfigMap, which maps IAM entities to Kubernetes groups."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import yaml

from ekstools.api.types import NodeGroup

logger = logging.getLogger(__name__)

OBJECT_NAME = "aws-auth"
OBJECT_NAMESPACE = "kube-system"

ROLES_DATA = "mapRoles"
ACCOUNTS_DATA = "mapAccounts"

GROUP_MASTERS = "system:masters"
ROLE_NODE_GROUP_USERNAME = "system:node:{{EC2PrivateDNSName}}"
ROLE_NODE_GROUP_GROUPS = ("system:bootstrappers", "system:nodes")


class AuthConfigMapError(Exception):
    """The auth ConfigMap could not be read, changed or stored."""


class ConfigMapNotFoundError(LookupError):
    """Raised by a client when the requested ConfigMap does not exist."""


@dataclass
class ConfigMap:
    """A Kubernetes ConfigMap: its identity and string data."""

    name: str = ""
    namespace: str = ""
    uid: str = ""
    data: Optional[dict[str, str]] = None

    @classmethod
    def default(cls) -> "ConfigMap":
        """An empty, not yet stored auth ConfigMap."""
        return cls(name=OBJECT_NAME, namespace=OBJECT_NAMESPACE, data={})


class ConfigMapClient(Protocol):
    """Access to ConfigMaps in the auth ConfigMap's namespace."""

    def get(self, name: str) -> ConfigMap: ...

    def create(self, cm: ConfigMap) -> ConfigMap: ...

    def update(self, cm: ConfigMap) -> ConfigMap: ...


def _load_yaml(text: str, what: str) -> Any:
    try:
        return yaml.safe_load(text) if text else None
    except yaml.YAMLError as err:
        raise AuthConfigMapError(f"unmarshalling {what}") from err


def _dump_yaml(value: Any) -> str:
    return yaml.safe_dump(value, default_flow_style=False, sort_keys=True)


class AuthConfigMap:
    """Modifies the auth ConfigMap and stores it through a client."""

    def __init__(self, client: ConfigMapClient, cm: Optional[ConfigMap] = None):
        if cm is None:
            cm = ConfigMap.default()
        if cm.data is None:
            cm.name = OBJECT_NAME
            cm.namespace = OBJECT_NAMESPACE
            cm.uid = ""
            cm.data = {}
        self.client = client
        self.cm = cm

    @classmethod
    def from_client(cls, client: ConfigMapClient) -> "AuthConfigMap":
        """Fetch the auth ConfigMap; a missing one starts out empty."""
        try:
            cm: Optional[ConfigMap] = client.get(OBJECT_NAME)
        except ConfigMapNotFoundError:
            cm = None
        except Exception as err:
            raise AuthConfigMapError("getting auth ConfigMap") from err
        logger.debug("aws-auth = %r", cm)
        return cls(client, cm)

    def _accounts(self) -> list[str]:
        loaded = _load_yaml(self.cm.data.get(ACCOUNTS_DATA, ""), ACCOUNTS_DATA)
        if loaded is None:
            return []
        if not isinstance(loaded, list) or not all(isinstance(a, str) for a in loaded):
            raise AuthConfigMapError(f"unmarshalling {ACCOUNTS_DATA}")
        return loaded

    def _set_accounts(self, accounts: list[str]) -> None:
        self.cm.data[ACCOUNTS_DATA] = _dump_yaml(accounts)

    def add_account(self, account: str) -> None:
        """Add an IAM account, keeping the list distinct and sorted."""
        accounts = sorted(set(self._accounts()) | {account})
        logger.info('adding account "%s" to auth ConfigMap', account)
        self._set_accounts(accounts)

    def remove_account(self, account: str) -> None:
        """Remove an IAM account; raises AuthConfigMapError when it is absent."""
        accounts = self._accounts()
        if account not in accounts:
            raise AuthConfigMapError(f'account "{account}" not found in auth ConfigMap')
        logger.info('removing account "%s" from auth ConfigMap', account)
        self._set_accounts([acc for acc in accounts if acc != account])

    def _roles(self) -> list[dict[str, Any]]:
        loaded = _load_yaml(self.cm.data.get(ROLES_DATA, ""), ROLES_DATA)
        if loaded is None:
            return []
        if not isinstance(loaded, list) or not all(isinstance(r, dict) for r in loaded):
            raise AuthConfigMapError(f"unmarshalling {ROLES_DATA}")
        return loaded

    def _set_roles(self, roles: list[dict[str, Any]]) -> None:
        self.cm.data[ROLES_DATA] = _dump_yaml(roles)

    def add_role(self, arn: str, username: str, groups: list[str]) -> None:
        """Map an IAM role to a user name and Kubernetes groups; duplicates are kept."""
        roles = self._roles()
        roles.append({"rolearn": arn, "username": username, "groups": list(groups)})
        logger.info('adding role "%s" to auth ConfigMap', arn)
        self._set_roles(roles)

    def remove_role(self, arn: str) -> None:
        """Remove exactly one mapping of the role, even if it appears several times."""
        if not arn:
            raise AuthConfigMapError("nodegroup instance role ARN is not set")
        roles = self._roles()
        for position, role in enumerate(roles):
            if role.get("rolearn") == arn:
                logger.info('removing role "%s" from auth ConfigMap', arn)
                del roles[position]
                self._set_roles(roles)
                return
        raise AuthConfigMapError(f'instance role ARN "{arn}" not found in auth ConfigMap')

    def save(self) -> None:
        """Store the ConfigMap, creating it when it has no UID yet, else updating it."""
        if not self.cm.uid:
            self.cm = self.client.create(self.cm)
        else:
            self.cm = self.client.update(self.cm)


def _instance_role_arn(ng: NodeGroup) -> str:
    return ng.iam.instance_role_arn if ng.iam is not None else ""


def add_node_group(client: ConfigMapClient, ng: NodeGroup) -> None:
    """Add the node group's instance role to the auth ConfigMap and store it."""
    acm = AuthConfigMap.from_client(client)
    try:
        acm.add_role(_instance_role_arn(ng), ROLE_NODE_GROUP_USERNAME, list(ROLE_NODE_GROUP_GROUPS))
    except AuthConfigMapError as err:
        raise AuthConfigMapError("adding nodegroup to auth ConfigMap") from err
    try:
        acm.save()
    except Exception as err:
        raise AuthConfigMapError("saving auth ConfigMap") from err
    logger.debug('saved auth ConfigMap for "%s"', ng.name)


def remove_node_group(client: ConfigMapClient, ng: NodeGroup) -> None:
    """Remove the node group's instance role from the auth ConfigMap and store it."""
    acm = AuthConfigMap.from_client(client)
    try:
        acm.remove_role(_instance_role_arn(ng))
    except AuthConfigMapError as err:
        raise AuthConfigMapError("removing nodegroup from auth ConfigMap") from err
    try:
        acm.save()
    except Exception as err:
        raise AuthConfigMapError("updating auth ConfigMap after removing role") from err
    logger.debug("updated auth ConfigMap for %s", ng.name)