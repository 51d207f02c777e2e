"""
Path: terrain_streamer/host/config/value_default.py

Funktionsweise: Zentrale Parameter-Defaults für alle einstellbaren Felder des Terrain-Streamers
- Min/Max/Step/Default Werte für World-, Budget- und Iterations-Parameter
- Organisiert nach Bereichen (WORLD, BUDGET, ITERATION)
- Validation-Rules und Parameter-Constraints
- Einheitliche Suffix-Definitionen
"""


class ConfigurationError(ValueError):
    """Ungültige Konfiguration durch den Aufrufer (z.B. zu kleine Resolution)"""


class WORLD:
    """Parameter für WorldConfig (host/config/world_config.py)"""
    RESOLUTIONMIN = 2

    WORLD_SCALE = {"min": 1.0, "max": 100000.0, "default": 6000.0, "step": 100.0}
    DEPTH_DIVIDER = {"min": 1.0, "max": 100000.0, "default": 1000.0, "step": 100.0}
    MAP_SIZE = {"min": 1.0, "max": 100000.0, "default": 10000.0, "step": 100.0, "suffix": "m"}
    RESOLUTION = {"min": RESOLUTIONMIN, "max": 4097, "default": 257, "step": 1, "suffix": "Samples"}
    DISTANT_RESOLUTION = {"min": RESOLUTIONMIN, "max": 4097, "default": 33, "step": 1, "suffix": "Samples"}
    HIGH_RES_RINGS = {"min": 0, "max": 16, "default": 2, "step": 1, "suffix": "Tiles"}
    WORLD_OFFSET_X = {"min": -100000.0, "max": 100000.0, "default": 0.0, "step": 1.0}
    WORLD_OFFSET_Y = {"min": -100000.0, "max": 100000.0, "default": 0.0, "step": 1.0}
    SEED = {"min": 0, "max": 999999, "default": 0, "step": 1}


class BUDGET:
    """Parameter für BudgetConfig und AdaptiveBudgetController"""
    USE_BUDGET = {"default": True}
    BASE_BUDGET = {"min": 1, "max": 1000000, "default": 10000, "step": 1000, "suffix": "Zellen/Frame"}
    ADAPTIVE = {"default": True}
    TARGET_FPS = {"min": 1.0, "max": 500.0, "default": 60.0, "step": 1.0, "suffix": "FPS"}
    ADJUST_STEP = {"min": 0, "max": 100000, "default": 1000, "step": 100, "suffix": "Zellen"}
    MIN_BUDGET = {"min": 1, "max": 1000000, "default": 3000, "step": 100, "suffix": "Zellen/Frame"}


class ITERATION:
    """Parameter für core/noise_iteration.py (eine Octave)"""
    DEPTH = {"min": 0, "max": 1000, "default": 20, "step": 1}
    SCALE = {"min": 0.01, "max": 1000.0, "default": 20.0, "step": 0.1}
    RARITY = {"min": 0.01, "max": 100.0, "default": 1.0, "step": 0.01}
    OFFSET_X = {"min": -100000.0, "max": 100000.0, "default": 100.0, "step": 1.0}
    OFFSET_Y = {"min": -100000.0, "max": 100000.0, "default": 100.0, "step": 1.0}
    DISTORTION_X = {"min": 0.01, "max": 100.0, "default": 1.0, "step": 0.01}
    DISTORTION_Y = {"min": 0.01, "max": 100.0, "default": 1.0, "step": 0.01}


class VALIDATION_RULES:
    """
    Funktionsweise: Definiert Parameter-Abhängigkeiten und Validation-Rules
    - Cross-Parameter Constraints mit Fehlermeldung (harte Fehler)
    - Warning-Thresholds für Performance-kritische Parameter
    Min/Max der Parameter-Dicts sind Slider-Grenzen, Abweichungen erzeugen nur Warnungen
    """

    WORLD_CONSTRAINTS = {
        "lod_distinguishable": "resolution und distant_resolution müssen sich unterscheiden"  # LOD über Resolution erkennbar
    }

    BUDGET_CONSTRAINTS = {
        "floor_below_base": "min_budget liegt über base_budget, Budget startet unter dem Floor"
    }

    PERFORMANCE_WARNINGS = {
        "large_resolution": 1025,
        "tiny_budget": 1000
    }


def get_parameter_config(section, parameter_name):
    """
    Funktionsweise: Holt Parameter-Konfiguration für einen Bereich und Parameter
    Parameter: section (str) - "world", "budget" oder "iteration"
    Parameter: parameter_name (str)
    Return: dict mit min/max/default/step/suffix
    """
    sections = {
        "world": WORLD,
        "budget": BUDGET,
        "iteration": ITERATION
    }

    if section not in sections:
        raise ValueError(f"Unknown parameter section: {section}")

    section_class = sections[section]

    if not hasattr(section_class, parameter_name.upper()):
        raise ValueError(f"Unknown parameter {parameter_name} for {section}")

    return getattr(section_class, parameter_name.upper())


def get_defaults(section):
    """
    Funktionsweise: Sammelt alle Default-Werte eines Bereichs
    Return: dict parameter_name (lowercase) → default
    """
    section_class = {"world": WORLD, "budget": BUDGET, "iteration": ITERATION}[section]
    defaults = {}
    for name, value in vars(section_class).items():
        if isinstance(value, dict) and "default" in value:
            defaults[name.lower()] = value["default"]
    return defaults


def validate_parameter_set(section, parameters):
    """
    Funktionsweise: Validiert kompletten Parameter-Satz für einen Bereich
    Aufgabe: Min/Max-Grenzen und Performance-Thresholds als Warnungen,
             Cross-Parameter Constraints aus VALIDATION_RULES als Fehler
    Parameter: section (str), parameters (dict)
    Return: (is_valid: bool, warnings: list, errors: list)
    """
    warnings = []
    errors = []

    for name, value in parameters.items():
        try:
            config = get_parameter_config(section, name)
        except ValueError:
            continue
        if isinstance(value, bool) or "min" not in config:
            continue
        if value < config["min"]:
            warnings.append(f"{name}={value} liegt unter empfohlenem Minimum {config['min']}")
        elif value > config["max"]:
            warnings.append(f"{name}={value} liegt über empfohlenem Maximum {config['max']}")

    if section == "world":
        resolution = parameters.get("resolution", WORLD.RESOLUTION["default"])
        distant = parameters.get("distant_resolution", WORLD.DISTANT_RESOLUTION["default"])
        if resolution == distant:
            errors.append(VALIDATION_RULES.WORLD_CONSTRAINTS["lod_distinguishable"])
        if distant > resolution:
            warnings.append("distant_resolution ist höher als resolution")
        if resolution > VALIDATION_RULES.PERFORMANCE_WARNINGS["large_resolution"]:
            warnings.append("Sehr hohe resolution verlangsamt das Streaming deutlich")

    if section == "budget":
        base = parameters.get("base_budget", BUDGET.BASE_BUDGET["default"])
        floor = parameters.get("min_budget", BUDGET.MIN_BUDGET["default"])
        if floor > base:
            warnings.append(VALIDATION_RULES.BUDGET_CONSTRAINTS["floor_below_base"])
        if base < VALIDATION_RULES.PERFORMANCE_WARNINGS["tiny_budget"]:
            warnings.append("Kleines Budget führt zu sehr langsamer Konvergenz")

    return len(errors) == 0, warnings, errors
