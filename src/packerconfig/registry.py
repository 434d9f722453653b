"""Read-only registries mapping type tags to record constructors."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Generic, Literal, TypeVar

from packerconfig.errors import UnknownTypeError
from packerconfig.records import Builder, PostProcessor, Provisioner, TypedRecord

Category = Literal["builder", "provisioner", "post-processor"]

R = TypeVar("R", bound=TypedRecord)

AMAZON_CHROOT = "amazon-chroot"
AMAZON_EBS = "amazon-ebs"
AMAZON_INSTANCE = "amazon-instance"
DIGITALOCEAN = "digitalocean"
DOCKER = "docker"
GOOGLECOMPUTE = "googlecompute"
NULL = "null"
PARALLELS_ISO = "parallels-iso"
PARALLELS_PVM = "parallels-pvm"
QEMU = "qemu"
VIRTUALBOX_ISO = "virtualbox-iso"
VIRTUALBOX_OVF = "virtualbox-ovf"
VMWARE_ISO = "vmware-iso"
VMWARE_VMX = "vmware-vmx"

ANSIBLE = "ansible"
ANSIBLE_LOCAL = "ansible-local"
CHEF_CLIENT = "chef-client"
CHEF_SOLO = "chef-solo"
FILE = "file"
POWERSHELL = "powershell"
PUPPET_MASTERLESS = "puppet-masterless"
PUPPET_SERVER = "puppet-server"
SALT_MASTERLESS = "salt-masterless"
SHELL = "shell"
SHELL_LOCAL = "shell-local"
WINDOWS_RESTART = "windows-restart"
WINDOWS_SHELL = "windows-shell"

CHECKSUM = "checksum"
COMPRESS = "compress"
DOCKER_IMPORT = "docker-import"
DOCKER_PUSH = "docker-push"
DOCKER_SAVE = "docker-save"
DOCKER_TAG = "docker-tag"
MANIFEST = "manifest"
VAGRANT = "vagrant"
VAGRANT_CLOUD = "vagrant-cloud"

BUILDER_TAGS = (
    AMAZON_CHROOT,
    AMAZON_EBS,
    AMAZON_INSTANCE,
    DIGITALOCEAN,
    DOCKER,
    GOOGLECOMPUTE,
    NULL,
    PARALLELS_ISO,
    PARALLELS_PVM,
    QEMU,
    VIRTUALBOX_ISO,
    VIRTUALBOX_OVF,
    VMWARE_ISO,
    VMWARE_VMX,
)

PROVISIONER_TAGS = (
    ANSIBLE,
    ANSIBLE_LOCAL,
    CHEF_CLIENT,
    CHEF_SOLO,
    FILE,
    POWERSHELL,
    PUPPET_MASTERLESS,
    PUPPET_SERVER,
    SALT_MASTERLESS,
    SHELL,
    SHELL_LOCAL,
    WINDOWS_RESTART,
    WINDOWS_SHELL,
)

POST_PROCESSOR_TAGS = (
    CHECKSUM,
    COMPRESS,
    DOCKER_IMPORT,
    DOCKER_PUSH,
    DOCKER_SAVE,
    DOCKER_TAG,
    MANIFEST,
    SHELL_LOCAL,
    VAGRANT,
    VAGRANT_CLOUD,
)


@dataclass(frozen=True, slots=True)
class Registry(Generic[R]):
    """Immutable tag -> constructor table for one record category."""

    category: Category
    entries: Mapping[str, Callable[[str], R]]

    @classmethod
    def from_tags(
        cls,
        category: Category,
        tags: Iterable[str],
        constructor: Callable[[str], R],
    ) -> Registry[R]:
        entries: dict[str, Callable[[str], R]] = {}
        for tag in tags:
            entries[tag] = constructor
        return cls(category=category, entries=MappingProxyType(entries))

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(self.entries)

    def __contains__(self, tag: object) -> bool:
        return tag in self.entries

    def create(self, tag: str) -> R:
        constructor = self.entries.get(tag)
        if constructor is None:
            raise UnknownTypeError(
                f"Unrecognized {self.category} type.",
                tag=tag,
                category=self.category,
                hint=f"Known {self.category} types: {', '.join(sorted(self.entries))}.",
            )
        return constructor(tag)


BUILDERS: Registry[Builder] = Registry.from_tags("builder", BUILDER_TAGS, Builder)
PROVISIONERS: Registry[Provisioner] = Registry.from_tags(
    "provisioner", PROVISIONER_TAGS, Provisioner
)
POST_PROCESSORS: Registry[PostProcessor] = Registry.from_tags(
    "post-processor", POST_PROCESSOR_TAGS, PostProcessor
)


def get_registry(category: str) -> Registry[TypedRecord]:
    if category == "builder":
        return BUILDERS  # type: ignore[return-value]
    if category == "provisioner":
        return PROVISIONERS  # type: ignore[return-value]
    if category == "post-processor":
        return POST_PROCESSORS  # type: ignore[return-value]
    raise UnknownTypeError(
        f"No registry exists for category `{category}`.",
        tag=category,
        category="registry",
        hint="Use one of: builder, provisioner, post-processor.",
    )
