"""
Tests for the Configuration Manager.

This module tests configuration loading, merging of config directories,
environment variable substitution, getters and error handling of ConfigManager.
"""

import tempfile
from pathlib import Path

import pytest

from internal.config.manager import ConfigManager, substituteEnvVars

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sampleConfigToml():
    """Provide sample valid TOML configuration."""
    return """
[lameness]
self-training = false

[lameness.classifier]
alpha = 1.0

[storage]
type = "fs"
io-retries = 3

[storage.fs]
base-dir = "tmp/lameness_data"

[logging]
level = "INFO"
"""


@pytest.fixture
def defaultsToml():
    """Provide default configuration TOML."""
    return """
[lameness]
self-training = false

[lameness.tokenizer]
min-token-length = 3
use-bigrams = false

[storage]
type = "memory"
retry-delay = 0.1
"""


@pytest.fixture
def invalidSyntaxToml():
    """Provide invalid TOML syntax."""
    return """
[storage
type = "missing_bracket"
"""


# ============================================================================
# Helper Functions
# ============================================================================


def createConfigFile(directory: Path, filename: str, content: str) -> Path:
    """Create a TOML config file in the specified directory."""
    filePath = directory / filename
    filePath.write_text(content)
    return filePath


def createConfigDir(baseDir: Path, dirName: str, files: dict) -> Path:
    """Create a config directory with multiple TOML files."""
    configDir = baseDir / dirName
    configDir.mkdir(parents=True, exist_ok=True)

    for filename, content in files.items():
        createConfigFile(configDir, filename, content)

    return configDir


# ============================================================================
# Initialization Tests
# ============================================================================


class TestConfigManagerInitialization:
    """Test ConfigManager initialization."""

    def testInitWithValidConfig(self, tempDir, sampleConfigToml):
        """Test initialization with valid configuration file."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = ConfigManager(str(configPath))

        assert manager.config_path == str(configPath)
        assert manager.config["storage"]["type"] == "fs"

    def testInitWithoutConfigFile(self, tempDir, defaultsToml):
        """Test initialization without main config file but with config dirs."""
        configDir = createConfigDir(tempDir, "defaults", {"defaults.toml": defaultsToml})

        manager = ConfigManager(str(tempDir / "nonexistent.toml"), configDirs=[str(configDir)])
        assert manager.config["storage"]["type"] == "memory"

    def testInitWithNonExistentConfigAndNoDirs(self, tempDir):
        """Test initialization fails when config file doesn't exist and no dirs provided."""
        with pytest.raises(SystemExit):
            ConfigManager(str(tempDir / "nonexistent.toml"))

    def testDotEnvFileIsLoaded(self, tempDir, monkeypatch):
        """Test that variables from .env file are substituted."""
        # Restored by monkeypatch after the test
        monkeypatch.setenv("LAMENESS_DATA_DIR", "")
        dotEnvPath = createConfigFile(tempDir, ".env", 'LAMENESS_DATA_DIR="/var/lib/lameness"\n')
        configPath = createConfigFile(tempDir, "config.toml", '[storage.fs]\nbase-dir = "${LAMENESS_DATA_DIR}"\n')

        manager = ConfigManager(str(configPath), dotEnvFile=str(dotEnvPath))
        assert manager.getStorageConfig()["fs"]["base-dir"] == "/var/lib/lameness"

    def testMissingDotEnvFileIsSkipped(self, tempDir, sampleConfigToml):
        """Test that missing .env file is not an error."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = ConfigManager(str(configPath), dotEnvFile=str(tempDir / "missing.env"))
        assert manager.config is not None


# ============================================================================
# Configuration Merging Tests
# ============================================================================


class TestConfigurationMerging:
    """Test configuration merging logic."""

    def testConfigDirsOverrideMainConfig(self, tempDir, sampleConfigToml, defaultsToml):
        """Test that config dirs merge on top of the main config."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "defaults", {"defaults.toml": defaultsToml})

        manager = ConfigManager(str(configPath), configDirs=[str(configDir)])

        # Overridden by config dir
        assert manager.config["storage"]["type"] == "memory"
        # Kept from main config
        assert manager.config["storage"]["io-retries"] == 3
        assert manager.config["storage"]["fs"]["base-dir"] == "tmp/lameness_data"
        # Added by config dir
        assert manager.config["storage"]["retry-delay"] == 0.1
        assert manager.config["lameness"]["tokenizer"]["min-token-length"] == 3
        assert manager.config["lameness"]["classifier"]["alpha"] == 1.0

    def testMergePriority(self, tempDir):
        """Test that later files override earlier ones."""
        configPath = createConfigFile(tempDir, "config.toml", '[storage]\ntype = "fs"\nio-retries = 1\n')
        configDir = createConfigDir(
            tempDir,
            "configs",
            {
                "01-second.toml": '[storage]\ntype = "memory"\nio-retries = 2\n',
                "02-third.toml": '[storage]\ntype = "null"\n',
            },
        )

        manager = ConfigManager(str(configPath), configDirs=[str(configDir)])

        assert manager.config["storage"]["type"] == "null"
        assert manager.config["storage"]["io-retries"] == 2

    def testRecursiveConfigDiscovery(self, tempDir):
        """Test that nested directories are scanned."""
        configDir = createConfigDir(tempDir, "configs", {"base.toml": '[storage]\ntype = "fs"\n'})
        createConfigDir(configDir, "nested", {"lameness.toml": "[lameness]\nself-training = true\n"})

        manager = ConfigManager(str(tempDir / "none.toml"), configDirs=[str(configDir)])

        assert manager.getStorageConfig()["type"] == "fs"
        assert manager.getLamenessConfig()["self-training"] is True

    def testMergeArraysOverride(self, tempDir):
        """Test that arrays are overridden, not merged."""
        configPath = createConfigFile(tempDir, "config.toml", '[lameness.tokenizer]\nstopwords = ["a", "b"]\n')
        override = '[lameness.tokenizer]\nstopwords = ["c"]\n'
        configDir = createConfigDir(tempDir, "configs", {"override.toml": override})

        manager = ConfigManager(str(configPath), configDirs=[str(configDir)])

        assert manager.config["lameness"]["tokenizer"]["stopwords"] == ["c"]


# ============================================================================
# Getter Methods Tests
# ============================================================================


class TestGetterMethods:
    """Test configuration getter methods."""

    def testGetters(self, tempDir, sampleConfigToml):
        """Test section getters."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        manager = ConfigManager(str(configPath))

        assert manager.getLoggingConfig() == {"level": "INFO"}
        assert manager.getStorageConfig()["fs"] == {"base-dir": "tmp/lameness_data"}
        assert manager.getLamenessConfig()["classifier"] == {"alpha": 1.0}
        assert manager.get("missing", "default") == "default"

    def testGettersOfMissingSections(self, tempDir):
        """Test that missing sections are returned as empty dicts."""
        configPath = createConfigFile(tempDir, "config.toml", "")
        manager = ConfigManager(str(configPath))

        assert manager.getLoggingConfig() == {}
        assert manager.getStorageConfig() == {}
        assert manager.getLamenessConfig() == {}


# ============================================================================
# Environment Substitution Tests
# ============================================================================


class TestEnvironmentSubstitution:
    """Test ${VAR} placeholders substitution."""

    def testSubstituteNested(self, monkeypatch):
        """Test substitution in nested dicts and lists."""
        monkeypatch.setenv("LAMENESS_TEST_DIR", "/data")

        result = substituteEnvVars(
            {"fs": {"base-dir": "${LAMENESS_TEST_DIR}/snapshots"}, "list": ["${LAMENESS_TEST_DIR}"]}
        )

        assert result == {"fs": {"base-dir": "/data/snapshots"}, "list": ["/data"]}

    def testUnknownVariableIsKept(self, monkeypatch):
        """Test that unset variables leave the placeholder unchanged."""
        monkeypatch.delenv("LAMENESS_UNSET_VAR", raising=False)
        assert substituteEnvVars("${LAMENESS_UNSET_VAR}") == "${LAMENESS_UNSET_VAR}"

    def testNonStringValuesUnchanged(self):
        """Test that numbers and booleans are returned as is."""
        assert substituteEnvVars(3) == 3
        assert substituteEnvVars(True) is True


# ============================================================================
# Error Handling Tests
# ============================================================================


class TestErrorHandling:
    """Test error handling for various failure scenarios."""

    def testInvalidTomlSyntax(self, tempDir, invalidSyntaxToml):
        """Test handling of invalid TOML syntax."""
        configPath = createConfigFile(tempDir, "config.toml", invalidSyntaxToml)

        with pytest.raises(SystemExit):
            ConfigManager(str(configPath))

    def testInvalidTomlInConfigDir(self, tempDir, sampleConfigToml, invalidSyntaxToml):
        """Test that invalid TOML in config directory is skipped."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "configs", {"invalid.toml": invalidSyntaxToml})

        manager = ConfigManager(str(configPath), configDirs=[str(configDir)])

        assert manager.config["storage"]["type"] == "fs"

    def testNonExistentConfigDirectory(self, tempDir, sampleConfigToml):
        """Test that non-existent config directory is skipped."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = ConfigManager(str(configPath), configDirs=[str(tempDir / "nonexistent")])

        assert manager.config["storage"]["type"] == "fs"

    def testConfigDirIsFile(self, tempDir, sampleConfigToml):
        """Test that config dir path pointing to a file is skipped."""
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        filePath = createConfigFile(tempDir, "notadir.txt", "content")

        manager = ConfigManager(str(configPath), configDirs=[str(filePath)])

        assert manager.config["storage"]["type"] == "fs"
