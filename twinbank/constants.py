# twinbank - Two-bank Images, No Kludges
# SPDX-License-Identifier Apache-2.0

# All sizes are in MiB. Changing any of these breaks in-place updates of
# images that were already shipped.

SECTOR_SIZE     = 512
SECTORS_PER_MIB = 1024 * 1024 // SECTOR_SIZE
MIB_PER_GIB     = 1024

# Scaling factors, in MiB per GiB of OS image
BOOT_SCALE_FACTOR     = 20
ROOT_SCALE_FACTOR     = 460
HASH_SCALE_FACTOR     = 5
RESERVE_SCALE_FACTOR  = 15
PRIVATE_SCALE_FACTOR  = 24

# Fixed sizes
GPT_MIB           = 1
GPT_FOOTPRINT_MIB = GPT_MIB * 2
BIOS_MIB          = 4
EFI_MIB           = 5
DATA_MIB          = 1

# Partition type GUIDs
BOOT_TYPECODE     = "6b636168-7420-6568-2070-6c616e657421"
ROOT_TYPECODE     = "5526016a-1a97-4ea4-b39a-b7c8c6ca4502"
HASH_TYPECODE     = "598f10af-c955-4456-6a99-7720068a6cea"
RESERVED_TYPECODE = "0c5d99a5-d331-4147-baef-08e2b855bdc9"
PRIVATE_TYPECODE  = "440408bb-eb0b-4328-a6e5-a29038fad706"
DATA_TYPECODE     = "626f7474-6c65-6474-6861-726d61726b73"

BIOS_BOOT_TYPECODE  = "ef02"
EFI_SYSTEM_TYPECODE = "C12A7328-F81F-11D2-BA4B-00A0C93EC93B"
EFI_BACKUP_TYPECODE = "B39CE39C-0A00-B4AB-2D11-F18F8237A21C"

# Fixed partition GUIDs of the data partitions, read at boot to decide which
# one gets mounted
DATA_PREFERRED_PARTGUID = "5b94e8df-28b8-485c-9d19-362263b5944c"
DATA_FALLBACK_PARTGUID  = "69040874-417d-4e26-a764-7885f22007ea"

# Partition labels
LABEL_PREFIX      = "BOTTLEROCKET-"
BIOS_LABEL        = "BIOS-BOOT"
EFI_SYSTEM_LABEL  = "EFI-SYSTEM"
EFI_BACKUP_LABEL  = "EFI-BACKUP"
PRIVATE_LABEL     = LABEL_PREFIX + "PRIVATE"

# GPT attribute bits used by the bootloader to pick the active bank
GPTPRIO_PRIORITY_BIT   = 48
GPTPRIO_SUCCESSFUL_BIT = 56

# sgdisk asks for a random partition GUID with this value
GENERATE_GUID = "R"
