"""Shared constants for the SMB-over-WireGuard lab scripts."""

# === Exit codes: server side (validate / reset / demo) ===
EC_OK = 0
EC_CONFIG = 1
EC_BOUNDARY = 2
EC_FUNCTIONAL = 3
EC_PARTIAL = 20  # snapshot finished but some captures failed

# === Exit codes: Windows client side ===
EC_CLIENT_OK = 0
EC_GENERIC = 4
EC_MAP = 10
EC_VALIDATION = 11

# === SMB defaults ===
SMB_PORT = 445
SMB_SHARE = "Public"
SMB_USER = "adminsmb"
SMB_GROUP = "adminsmb"
SMB_HOST = "127.0.0.1"
CLIENT_SMB_HOST = "10.8.0.1"  # server address inside the tunnel

# === WireGuard / firewall ===
VPN_SUBNET = "10.8.0.0/24"
WG_IFACE = "wg0-client"
UFW_DEFAULTS_FILE = "/etc/default/ufw"
UFW_RULE_COMMENT = "SMB over WireGuard"
UFW_RULE_COMMENT_V6 = "SMB over WireGuard (v6)"

# === Samba ===
SMB_CONF = "/etc/samba/smb.conf"
SAMBA_LOG_GLOB = "/var/log/samba/log.*"
SMBD_UNIT = "smbd"
NMBD_UNIT = "nmbd"

# === Filesystem layout ===
SHARE_BASE = "/srv/samba"
PUBLIC_DIR = "public"
DIRECTION_DIR = "direction"

TRAVERSAL_MODE = 0o755
PUBLIC_DIR_MODE = 0o775
PUBLIC_FILE_MODE = 0o664
DIRECTION_DIR_MODE = 0o770
DIRECTION_FILE_MODE = 0o660

# === Snapshots ===
SNAPSHOT_DIR = "/root/smb-snapshots"
SNAPSHOT_TS_FORMAT = "%Y-%m-%d-%H%M%S"

# === Windows client ===
DRIVE_LETTER = "Z"
PROGRAMDATA = r"C:\ProgramData"
BACKUP_SUBDIR = "smb-lab"
WORKSTATION_SERVICE = "LanmanWorkstation"
PROVIDER_ORDER_KEY = r"HKLM\SYSTEM\CurrentControlSet\Control\NetworkProvider\Order"
PROVIDER_ORDER_VALUE = "ProviderOrder"

# === Env flag parsing ===
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}
