from __future__ import annotations

VERSION = "v3.2.2"
AUTHOR = "SutandoTsukai181"
REPO = "RyuModManager"
RELEASE_NAME_MARKER = "Ryu Mod Manager"

INI = "YakuzaParless.ini"
MLO = "YakuzaParless.mlo"
ASI = "YakuzaParless.asi"
TXT = "ModList.txt"
TXT_OLD = "ModLoadOrder.txt"

MODS = "mods"
PARLESS = "Parless"
EXTERNAL_MODS = "_externalMods"

DINPUT8DLL = "dinput8.dll"
VERSIONDLL = "version.dll"
WINMMDLL = "winmm.dll"
WINMMLJ = "winmm.lj"

CURRENT_INI_VERSION = 4
UPDATE_CHECK_TIMEOUT = 5.0
