"""
pom.properties 生成

按 Java properties 格式记录 groupId、artifactId、version，
不写入时间戳，相同输入得到相同内容。
"""

from pathlib import Path
from typing import Dict, Union

from .. import __version__


def _escape(value: str, is_key: bool = False) -> str:
    """Java properties 转义"""
    out = []
    for index, ch in enumerate(value):
        if ch == '\\':
            out.append('\\\\')
        elif ch == '\t':
            out.append('\\t')
        elif ch == '\n':
            out.append('\\n')
        elif ch == '\r':
            out.append('\\r')
        elif ch == '\f':
            out.append('\\f')
        elif ch in '=:#!':
            out.append('\\' + ch)
        elif ch == ' ' and (is_key or index == 0):
            out.append('\\ ')
        elif ord(ch) < 0x20 or ord(ch) > 0x7e:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return ''.join(out)


def render_pom_properties(group_id: str, artifact_id: str, version: str) -> str:
    """生成 pom.properties 文本（键按字母排序）"""
    properties: Dict[str, str] = {
        'artifactId': artifact_id,
        'groupId': group_id,
        'version': version,
    }
    lines = [f"#Created by cbapack {__version__}"]
    for key in sorted(properties):
        lines.append(f"{_escape(key, is_key=True)}={_escape(properties[key])}")
    return "\n".join(lines) + "\n"


def create_pom_properties(
    group_id: str,
    artifact_id: str,
    version: str,
    output_file: Union[str, Path],
    force_creation: bool = True,
) -> bool:
    """写出 pom.properties

    Args:
        force_creation: 为 False 时内容未变化则不重写文件

    Returns:
        bool: 是否写入了文件
    """
    output_file = Path(output_file)
    content = render_pom_properties(group_id, artifact_id, version)

    if not force_creation and output_file.is_file():
        if output_file.read_text(encoding='iso-8859-1') == content:
            return False

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(content, encoding='iso-8859-1', newline='\n')
    return True
