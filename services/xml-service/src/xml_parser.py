"""Módulo para converter respostas XML do IntelliSOURCE em estruturas dict/list"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Union
from lxml import etree


GenericNode = Union[str, Dict[str, Any]]

ERROR_PREFIX = 'XML Parse Error'

# Nunca resolver entidades nem ir à rede (XXE)
SECURE_PARSER_OPTIONS = {
    'resolve_entities': False,
    'no_network': True,
    'load_dtd': False,
    'dtd_validation': False,
    'huge_tree': False,
    'strip_cdata': True,
}


class XmlParseError(ValueError):
    """XML mal formado recebido do fornecedor"""


@contextmanager
def secure_parser(encoding: Optional[str] = None) -> Iterator[etree.XMLParser]:
    """
    Cria um parser isolado para uma única chamada.

    O parser (e o seu error_log) existe apenas dentro do bloco. Qualquer
    XMLSyntaxError levantado lá dentro sai como XmlParseError com a
    primeira mensagem de diagnóstico.

    encoding força a codificação e ignora a da declaração XML.
    """
    parser = etree.XMLParser(encoding=encoding, **SECURE_PARSER_OPTIONS)
    try:
        yield parser
    except etree.XMLSyntaxError as e:
        raise XmlParseError(_first_diagnostic(parser, e)) from e


def _first_diagnostic(parser: etree.XMLParser, error: etree.XMLSyntaxError) -> str:
    entries = list(parser.error_log) or list(getattr(error, 'error_log', None) or [])
    if entries and entries[0].message:
        return f"{ERROR_PREFIX}: {entries[0].message.strip()}"
    if error.msg:
        return f"{ERROR_PREFIX}: {error.msg}"
    return ERROR_PREFIX


def parse(xml_text: Union[str, bytes]) -> GenericNode:
    """
    Converte um documento XML em dict/list/str

    Args:
        xml_text: Documento XML (UTF-8)

    Returns:
        dict com atributos ('@nome') e filhos, ou a string do texto quando o
        elemento raiz não tem atributos nem filhos. Entrada vazia devolve {}.

    Raises:
        XmlParseError: Se o XML estiver mal formado
    """
    if xml_text is None:
        return {}
    if not xml_text.strip():
        return {}

    encoding = None
    if isinstance(xml_text, str):
        # Texto já descodificado: a declaração (ex. ISO-8859-1) deixa de valer
        xml_bytes = xml_text.encode('utf-8')
        encoding = 'utf-8'
    else:
        xml_bytes = xml_text

    with secure_parser(encoding) as parser:
        root = etree.fromstring(xml_bytes, parser=parser)
    return xml_to_array(root)


def xml_to_array(element: etree._Element) -> GenericNode:
    """Converte um elemento; sem atributos e sem filhos colapsa para string"""
    result: Dict[str, Any] = {}

    for name, value in element.attrib.items():
        result['@' + _local_name(name)] = value

    for child in _child_elements(element):
        key = _local_name(child.tag)
        child_value = parse_node(child)

        # Elementos repetidos viram lista
        if key in result:
            if not isinstance(result[key], list):
                result[key] = [result[key]]
            result[key].append(child_value)
        else:
            result[key] = child_value

    if not result:
        return _text(element)

    return result


def parse_node(node: etree._Element) -> GenericNode:
    """
    Converte um nó filho.

    Com filhos -> xml_to_array; só com atributos -> {'@attr': ..., '_value': texto};
    caso contrário -> texto.
    """
    if _child_elements(node):
        return xml_to_array(node)

    attrs = {'@' + _local_name(name): value for name, value in node.attrib.items()}
    if attrs:
        attrs['_value'] = _text(node)
        return attrs

    return _text(node)


def as_list(value: Any) -> List[Any]:
    """Normaliza o valor único/lista produzido pelo parser para lista"""
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _child_elements(element: etree._Element) -> List[etree._Element]:
    # Ignora comentários, processing instructions e entidades não resolvidas
    return [child for child in element if isinstance(child.tag, str)]


def _text(element: etree._Element) -> str:
    parts = [element.text or '']
    parts.extend(child.tail or '' for child in element)
    return ''.join(parts)


def _local_name(name: str) -> str:
    if name.startswith('{'):
        return name.split('}', 1)[1]
    return name
