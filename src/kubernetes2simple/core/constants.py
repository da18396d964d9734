"""Constants — paths, release locations, descriptor names, platform maps."""

import re

from kubernetes2simple.pacts.types import SourceMode

# Private cache root, relative to the working directory
CACHE_DIRNAME = ".kubernetes2simple"

# Optional project configuration, in the working directory
CONFIG_FILENAME = "k2s.yaml"

K2S_REPO = "helmfile2compose/kubernetes2simple"
CONVERTER_URL = (
    f"https://github.com/{K2S_REPO}/releases/latest/download/kubernetes2simple.py"
)
ISSUES_URL = f"https://github.com/{K2S_REPO}/issues"

GITHUB_API = "https://api.github.com"
USER_AGENT = "kubernetes2simple"

# Host identity → release-artifact vocabulary
SUPPORTED_OS = ("linux", "darwin")
ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}

MIN_PYTHON = (3, 10)
PYTHON_PACKAGES = ("pyyaml", "cryptography")
# Imports the converter needs at runtime
PYTHON_PROBE = "import yaml; from cryptography import x509"

# Descriptor filenames, in lookup order
HELMFILE_NAMES = ("helmfile.yaml", "helmfile.yml", "helmfile.yaml.gotmpl")
CHART_NAME = "Chart.yaml"
CHART_DEPENDENCY_FILES = ("Chart.lock", "requirements.yaml")
# Later files override earlier ones (helm -f semantics)
VALUES_FILES = ("values.yaml", "values.yml")
MANIFEST_GLOBS = ("*.yaml", "*.yml")

# A top-level resource kind declaration, e.g. "kind: Deployment"
_KIND_LINE_RE = re.compile(r'^kind:', re.MULTILINE)

# Directory name helmfile uses when a nested helmfile ignores --output-dir
NESTED_RENDER_DIRNAME = ".helmfile-rendered"

# Tools needed to render each source kind (on top of the Python stack)
MODE_TOOLS = {
    SourceMode.HELMFILE: ("helm", "helmfile"),
    SourceMode.CHART: ("helm",),
    SourceMode.MANIFESTS: (),
}

MODE_LABELS = {
    SourceMode.HELMFILE: "helmfile project",
    SourceMode.CHART: "Helm chart",
    SourceMode.MANIFESTS: "Kubernetes manifests",
}
