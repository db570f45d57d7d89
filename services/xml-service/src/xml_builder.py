"""Módulo para gerar pedidos XML a partir de dicionários"""

from typing import Any, Mapping, Optional, Set
from lxml import etree


XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


class XmlBuildError(ValueError):
    """Estrutura que não pode ser convertida em XML"""


def build(data: Mapping, root_element: str = 'request') -> str:
    """
    Gera XML a partir de um dicionário

    Regras:
    - chave '@nome' -> atributo 'nome' do elemento atual
    - lista -> um elemento irmão por item
    - dict -> um elemento filho
    - restantes valores -> texto (escapado); bool -> 'Y'/'N'

    Args:
        data: Dicionário com os dados do pedido
        root_element: Nome do elemento raiz

    Returns:
        String XML com declaração

    Raises:
        XmlBuildError: Se a estrutura for cíclica, demasiado profunda ou tiver nomes inválidos
    """
    if not isinstance(data, Mapping):
        raise XmlBuildError(f"Data must be a mapping, got: {type(data)}")

    try:
        root = etree.Element(root_element)
        _array_to_xml(data, root, set())
    except XmlBuildError:
        raise
    except RecursionError as e:
        raise XmlBuildError("Structure too deeply nested to convert to XML") from e
    except ValueError as e:
        # Nomes de tag inválidos ou texto com caracteres não permitidos em XML
        raise XmlBuildError(f"Failed to build XML: {str(e)}") from e

    body = etree.tostring(root, encoding='unicode')
    return f"{XML_DECLARATION}\n{body}\n"


def _array_to_xml(data: Mapping, element: etree._Element, path: Set[int]) -> None:
    # ids dos dicts/listas no caminho atual, para detetar ciclos
    if id(data) in path:
        raise XmlBuildError("Cyclic structure cannot be converted to XML")
    path = path | {id(data)}

    for key, value in data.items():
        key = str(key)

        if key.startswith('@'):
            element.set(key[1:], _to_text(value))
            continue

        if isinstance(value, (list, tuple)):
            if id(value) in path:
                raise XmlBuildError("Cyclic structure cannot be converted to XML")
            for item in value:
                child = etree.SubElement(element, key)
                if isinstance(item, Mapping):
                    _array_to_xml(item, child, path | {id(value)})
                else:
                    child.text = _to_text(item)
        elif isinstance(value, Mapping):
            child = etree.SubElement(element, key)
            _array_to_xml(value, child, path)
        else:
            child = etree.SubElement(element, key)
            child.text = _to_text(value)


def _to_text(value: Optional[Any]) -> str:
    if value is None:
        return ''
    # Flags no formato do fornecedor (Y/N)
    if isinstance(value, bool):
        return 'Y' if value else 'N'
    return str(value)
