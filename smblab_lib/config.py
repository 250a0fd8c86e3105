"""Environment-driven settings for the server and client scripts."""

import os
from typing import Mapping, Optional

from .constants import (
    SMB_SHARE, SMB_USER, SMB_GROUP, SMB_HOST, CLIENT_SMB_HOST,
    VPN_SUBNET, WG_IFACE, SHARE_BASE, PUBLIC_DIR, DIRECTION_DIR,
    SNAPSHOT_DIR, SMB_CONF, DRIVE_LETTER, PROGRAMDATA, TRUE_VALUES, FALSE_VALUES,
)
from .windows import unc_path


def env_str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    """Return env[name], treating an empty value as unset."""
    value = env.get(name)
    if value is None or value == "":
        return default
    return value


def env_flag(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = env.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    return default


class ServerSettings:
    """Knobs shared by validate, reset_smb and run_demo."""

    def __init__(self, share: str = SMB_SHARE, user: str = SMB_USER,
                 host: str = SMB_HOST, vpn_subnet: str = VPN_SUBNET,
                 password: Optional[str] = None, allow_interactive: bool = False,
                 reload_ufw: bool = False, show_log_tail: bool = False):
        self.share = share
        self.user = user
        self.host = host
        self.vpn_subnet = vpn_subnet
        self.password = password
        self.allow_interactive = allow_interactive
        self.reload_ufw = reload_ufw
        self.show_log_tail = show_log_tail

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServerSettings":
        env = os.environ if env is None else env
        return cls(
            share=env_str(env, "SMB_SHARE", SMB_SHARE),
            user=env_str(env, "SMB_USER", SMB_USER),
            host=env_str(env, "SMB_HOST", SMB_HOST),
            vpn_subnet=env_str(env, "VPN_SUBNET", VPN_SUBNET),
            password=env_str(env, "SMBCLIENT_PASS"),
            allow_interactive=env_flag(env, "ALLOW_INTERACTIVE", False),
            reload_ufw=env_flag(env, "RELOAD_UFW", False),
            show_log_tail=env_flag(env, "SHOW_LOG_TAIL", False),
        )

    @property
    def unc(self) -> str:
        return f"//{self.host}/{self.share}"


class UfwSettings:
    def __init__(self, iface: str = WG_IFACE, subnet_v4: Optional[str] = None,
                 enable_v6: bool = True):
        self.iface = iface
        self.subnet_v4 = subnet_v4
        self.enable_v6 = enable_v6

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "UfwSettings":
        env = os.environ if env is None else env
        return cls(
            iface=env_str(env, "WG_IFACE", WG_IFACE),
            subnet_v4=env_str(env, "WG_SUBNET_V4"),
            enable_v6=env_flag(env, "ENABLE_V6", True),
        )


class PermSettings:
    def __init__(self, base: str = SHARE_BASE, public: str = PUBLIC_DIR,
                 direction: str = DIRECTION_DIR, user: str = SMB_USER,
                 group: str = SMB_GROUP):
        self.base = base
        self.public = public
        self.direction = direction
        self.user = user
        self.group = group

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PermSettings":
        env = os.environ if env is None else env
        return cls(
            base=env_str(env, "BASE", SHARE_BASE),
            public=env_str(env, "PUBLIC", PUBLIC_DIR),
            direction=env_str(env, "DIRECTION", DIRECTION_DIR),
            user=env_str(env, "SMB_USER", SMB_USER),
            group=env_str(env, "SMB_GROUP", SMB_GROUP),
        )


class SnapshotSettings:
    def __init__(self, base_dir: str = SNAPSHOT_DIR, smb_conf: str = SMB_CONF):
        self.base_dir = base_dir
        self.smb_conf = smb_conf

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SnapshotSettings":
        env = os.environ if env is None else env
        return cls(
            base_dir=env_str(env, "SNAPSHOT_DIR", SNAPSHOT_DIR),
            smb_conf=env_str(env, "SMB_CONF", SMB_CONF),
        )


class ClientSettings:
    """Knobs for the Windows-side map / validate / reset scripts."""

    def __init__(self, host: str = CLIENT_SMB_HOST, share: str = SMB_SHARE,
                 user: Optional[str] = SMB_USER, password: Optional[str] = None,
                 drive_letter: str = DRIVE_LETTER, wg_iface: str = WG_IFACE,
                 programdata: str = PROGRAMDATA):
        self.host = host
        self.share = share
        self.user = user
        self.password = password
        self.drive_letter = drive_letter.rstrip(":").upper()
        self.wg_iface = wg_iface
        self.programdata = programdata

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        env = os.environ if env is None else env
        return cls(
            host=env_str(env, "SMB_HOST", CLIENT_SMB_HOST),
            share=env_str(env, "SMB_SHARE", SMB_SHARE),
            user=env_str(env, "SMB_USER", SMB_USER),
            password=env_str(env, "SMB_PASS"),
            drive_letter=env_str(env, "DRIVE_LETTER", DRIVE_LETTER),
            wg_iface=env_str(env, "WG_IFACE", WG_IFACE),
            programdata=env_str(env, "PROGRAMDATA", PROGRAMDATA),
        )

    @property
    def drive(self) -> str:
        return f"{self.drive_letter}:"

    @property
    def unc(self) -> str:
        return unc_path(self.host, self.share)
