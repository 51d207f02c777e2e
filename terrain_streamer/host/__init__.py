"""
Path: host/__init__.py

Host-seitige Module: Konfiguration (config), Qt-Manager (managers), Utilities (utils).
Managers werden hier nicht importiert, sie setzen den vollständig geladenen Core voraus.
"""
