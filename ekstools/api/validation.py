"""Validation of node group settings and node labels."""

from __future__ import annotations

import re

from ekstools.api.types import NodeGroup

_LABEL_NAME_MAX_LENGTH = 63
_LABEL_VALUE_MAX_LENGTH = 63
_DNS1123_SUBDOMAIN_MAX_LENGTH = 253

_QUALIFIED_NAME = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_LABEL_VALUE = re.compile(r"(([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9])?")
_DNS1123_SUBDOMAIN = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)

_KUBERNETES_DOMAINS = ("kubernetes.io", "k8s.io")
_KUBELET_ALLOWED_DOMAINS = (
    "kubelet.kubernetes.io",
    "node.kubernetes.io",
    "node-role.kubernetes.io",
)
_WELL_KNOWN_LABELS = frozenset(
    {
        "kubernetes.io/hostname",
        "kubernetes.io/instance-type",
        "kubernetes.io/os",
        "kubernetes.io/arch",
        "beta.kubernetes.io/instance-type",
        "beta.kubernetes.io/os",
        "beta.kubernetes.io/arch",
        "failure-domain.beta.kubernetes.io/zone",
        "failure-domain.beta.kubernetes.io/region",
        "failure-domain.kubernetes.io/zone",
        "failure-domain.kubernetes.io/region",
    }
)


class ValidationError(ValueError):
    """A node group configuration is invalid."""


def _format_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def _dns1123_subdomain_errors(value: str) -> list[str]:
    errors = []
    if len(value) > _DNS1123_SUBDOMAIN_MAX_LENGTH:
        errors.append(f"must be no more than {_DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _DNS1123_SUBDOMAIN.fullmatch(value):
        errors.append(
            "a DNS-1123 subdomain must consist of lower case alphanumeric characters, "
            "'-' or '.', and must start and end with an alphanumeric character"
        )
    return errors


def _qualified_name_errors(value: str) -> list[str]:
    parts = value.split("/")
    if len(parts) == 1:
        name = parts[0]
    elif len(parts) == 2:
        prefix, name = parts
        if not prefix:
            return ["prefix part must be non-empty"]
        prefix_errors = _dns1123_subdomain_errors(prefix)
        if prefix_errors:
            return [f"prefix part {msg}" for msg in prefix_errors]
    else:
        return [
            "a qualified name must consist of alphanumeric characters, '-', '_' or '.', "
            "with an optional DNS subdomain prefix and '/'"
        ]

    if not name:
        return ["name part must be non-empty"]
    errors = []
    if len(name) > _LABEL_NAME_MAX_LENGTH:
        errors.append(f"name part must be no more than {_LABEL_NAME_MAX_LENGTH} characters")
    if not _QUALIFIED_NAME.fullmatch(name):
        errors.append(
            "name part must consist of alphanumeric characters, '-', '_' or '.', "
            "and must start and end with an alphanumeric character"
        )
    return errors


def _label_value_errors(value: str) -> list[str]:
    errors = []
    if len(value) > _LABEL_VALUE_MAX_LENGTH:
        errors.append(f"must be no more than {_LABEL_VALUE_MAX_LENGTH} characters")
    if not _LABEL_VALUE.fullmatch(value):
        errors.append(
            "a valid label must be an empty string or consist of alphanumeric characters, "
            "'-', '_' or '.', and must start and end with an alphanumeric character"
        )
    return errors


def _in_domains(namespace: str, domains: tuple[str, ...]) -> bool:
    return any(namespace == domain or namespace.endswith("." + domain) for domain in domains)


def validate_node_group_labels(ng: NodeGroup) -> None:
    """Check that node labels are valid and do not misuse Kubernetes namespaces.

    Raises ValidationError on the first malformed label, or listing every
    unknown 'kubernetes.io' or 'k8s.io' label.
    """
    unknown_kubernetes_labels: list[str] = []

    for label, value in ng.labels.items():
        label_parts = label.split("/")
        if len(label_parts) > 2:
            raise ValidationError(
                f'node label key "{label}" is of invalid format, '
                "can only use one '/' separator"
            )

        errors = _qualified_name_errors(label)
        if errors:
            raise ValidationError(f'label "{label}" is invalid - {_format_list(errors)}')
        errors = _label_value_errors(value)
        if errors:
            raise ValidationError(
                f'label "{label}" has invalid value "{value}" - {_format_list(errors)}'
            )

        if len(label_parts) == 2:
            namespace = label_parts[0]
            is_kubernetes_label = _in_domains(namespace, _KUBERNETES_DOMAINS)
            allowed_kubelet_namespace = _in_domains(namespace, _KUBELET_ALLOWED_DOMAINS)
            if (
                is_kubernetes_label
                and not allowed_kubelet_namespace
                and label not in _WELL_KNOWN_LABELS
            ):
                unknown_kubernetes_labels.append(label)

    if unknown_kubernetes_labels:
        raise ValidationError(
            "unknown 'kubernetes.io' or 'k8s.io' labels were specified: "
            f"{_format_list(unknown_kubernetes_labels)}"
        )


def _check_iam_exclusive(ng: NodeGroup, value: str, field_name: str, path: str) -> None:
    if not value:
        return
    iam = ng.iam
    prefix = f"{path}.iam.{field_name} and {path}.iam"
    if iam.instance_role_name:
        raise ValidationError(f"{prefix}.instanceRoleName cannot be set at the same time")
    if iam.attach_policy_arns:
        raise ValidationError(f"{prefix}.attachPolicyARNs cannot be set at the same time")
    policies = iam.with_addon_policies
    if policies.auto_scaler:
        raise ValidationError(
            f"{prefix}.withAddonPolicies.autoScaler cannot be set at the same time"
        )
    if policies.external_dns:
        raise ValidationError(
            f"{prefix}.withAddonPolicies.externalDNS cannot be set at the same time"
        )
    if policies.image_builder:
        raise ValidationError(f"{prefix}.imageBuilder cannot be set at the same time")


def validate_node_group(index: int, ng: NodeGroup) -> None:
    """Check that the settings of the node group at the given index are compatible."""
    path = f"nodegroups[{index}]"
    if not ng.name:
        raise ValidationError(f"{path}.name must be set")

    if ng.iam is None:
        return

    _check_iam_exclusive(ng, ng.iam.instance_profile_arn, "instanceProfileARN", path)
    _check_iam_exclusive(ng, ng.iam.instance_role_arn, "instanceRoleARN", path)
    validate_node_group_labels(ng)