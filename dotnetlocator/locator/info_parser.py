"""
Parser for ``dotnet --info`` output.

The output is a sequence of sections. A section starts with an unindented
header line and holds indented lines until a blank line or the next header:

    .NET SDK:
     Version:           8.0.100
     Commit:            57efcf1350

    Runtime Environment:
     OS Name:     ubuntu
     OS Version:  22.04
     RID:         linux-x64

    Host:
      Version:      8.0.0
      Architecture: x64

    .NET SDKs installed:
      8.0.100 [/usr/share/dotnet/sdk]

    .NET runtimes installed:
      Microsoft.NETCore.App 8.0.0 [/usr/share/dotnet/shared/Microsoft.NETCore.App]

Sections we do not know about (workloads, environment variables, download
links) are skipped.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotnetlocator.core.exceptions import ParseError
from dotnetlocator.core.models import FrameworkInfo, SdkInfo, order_frameworks, order_sdks
from dotnetlocator.locator.paths import version_directory

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"

_SDK_LINE = re.compile(r"^(\S+)\s+\[(.+)\]$")
_FRAMEWORK_LINE = re.compile(r"^(\S+)\s+(\S+)\s+\[(.+)\]$")


class Section(Enum):
    """Sections of ``dotnet --info`` output."""

    HOST = "host"
    RUNTIME_ENVIRONMENT = "runtime_environment"
    ACTIVE_SDK = "active_sdk"
    SDK_LIST = "sdk_list"
    FRAMEWORK_LIST = "framework_list"
    IGNORED = "ignored"


@dataclass
class DotNetInfoReport:
    """Everything read from one ``dotnet --info`` run."""

    host_version: str = UNKNOWN
    host_architecture: str = UNKNOWN
    host_commit: Optional[str] = None
    active_sdk_version: Optional[str] = None
    active_sdk_commit: Optional[str] = None
    os_description: str = UNKNOWN
    rid: str = UNKNOWN
    base_path: Optional[Path] = None
    properties: Dict[str, str] = field(default_factory=dict)
    sdks: Tuple[SdkInfo, ...] = ()
    frameworks: Tuple[FrameworkInfo, ...] = ()


def classify_header(line: str) -> Section:
    """
    Classify a section header.

    Example:
        >>> classify_header(".NET SDKs installed:")
        <Section.SDK_LIST: 'sdk_list'>
    """
    header = line.strip().rstrip(":").strip().lower()

    if "sdks installed" in header or "sdk installed" in header:
        return Section.SDK_LIST
    if "runtimes installed" in header or "runtime installed" in header:
        return Section.FRAMEWORK_LIST
    if header.startswith("runtime environment"):
        return Section.RUNTIME_ENVIRONMENT
    if header.startswith(".net sdk") or header.startswith(".net core sdk"):
        return Section.ACTIVE_SDK
    if header == "host" or header.startswith("host ") or header.startswith(".net host"):
        return Section.HOST
    return Section.IGNORED


def _split_label(line: str) -> Optional[Tuple[str, str]]:
    key, separator, value = line.partition(":")
    key = key.strip()
    if not separator or not key:
        return None
    return key, value.strip()


def parse_dotnet_info(output: str) -> DotNetInfoReport:
    """
    Parse ``dotnet --info`` output.

    Args:
        output: Captured standard output

    Returns:
        DotNetInfoReport; SDKs and frameworks are deduplicated and ordered

    Raises:
        ParseError: If the output contains no recognizable section
    """
    report = DotNetInfoReport()
    sdks: List[SdkInfo] = []
    frameworks: List[FrameworkInfo] = []
    section: Optional[Section] = None
    recognized = False

    for raw_line in output.splitlines():
        if not raw_line.strip():
            section = None
            continue

        if not raw_line[0].isspace():
            section = classify_header(raw_line)
            recognized = recognized or section is not Section.IGNORED
            continue

        if section is None or section is Section.IGNORED:
            continue

        line = raw_line.strip()

        if section is Section.SDK_LIST:
            match = _SDK_LINE.match(line)
            if match:
                version, directory = match.groups()
                sdks.append(SdkInfo(version=version, path=version_directory(directory, version)))
            continue

        if section is Section.FRAMEWORK_LIST:
            match = _FRAMEWORK_LINE.match(line)
            if match:
                name, version, directory = match.groups()
                frameworks.append(
                    FrameworkInfo(
                        name=name, version=version, path=version_directory(directory, version)
                    )
                )
            continue

        label = _split_label(line)
        if label is None:
            continue
        key, value = label

        if section is Section.HOST:
            _apply_host_label(report, key, value)
        elif section is Section.ACTIVE_SDK:
            _apply_active_sdk_label(report, key, value)
        elif section is Section.RUNTIME_ENVIRONMENT:
            _apply_runtime_label(report, key, value)

    if not recognized:
        raise ParseError("dotnet --info output has no recognizable sections")

    if report.active_sdk_version and report.active_sdk_commit:
        sdks = [
            replace(sdk, commit_hash=report.active_sdk_commit)
            if sdk.version == report.active_sdk_version
            else sdk
            for sdk in sdks
        ]

    report.sdks = order_sdks(sdks)
    report.frameworks = order_frameworks(frameworks)
    logger.debug(
        f"Parsed dotnet --info: host {report.host_version}, "
        f"{len(report.sdks)} SDKs, {len(report.frameworks)} frameworks"
    )
    return report


def _apply_host_label(report: DotNetInfoReport, key: str, value: str) -> None:
    label = key.lower()
    if label == "version":
        report.host_version = value
    elif label == "architecture":
        report.host_architecture = value
    elif label == "commit":
        report.host_commit = value


def _apply_active_sdk_label(report: DotNetInfoReport, key: str, value: str) -> None:
    label = key.lower()
    if label == "version":
        report.active_sdk_version = value
    elif label == "commit":
        report.active_sdk_commit = value


def _apply_runtime_label(report: DotNetInfoReport, key: str, value: str) -> None:
    label = key.lower()
    if label == "os name":
        report.os_description = value
    elif label == "os version":
        if report.os_description == UNKNOWN:
            report.os_description = value
        else:
            report.os_description = f"{report.os_description} {value}"
    elif label == "rid":
        report.rid = value
    elif label == "base path":
        report.base_path = Path(value)
    else:
        report.properties[key] = value
