from .extract import extract_bullet_field, extract_red_flags, extract_section, to_item_list
from .parser import parse_enhanced, parse_structure
from .renderer import assemble_full_text, from_variant_dict, to_variant_dict
from .schema import ClinicalSectionStructure, EnhancedClinicalStructure, get_scheme
from .validator import is_structure_complete, structure_completeness, validate_completeness

__all__ = [
    "assemble_full_text",
    "extract_bullet_field",
    "extract_red_flags",
    "extract_section",
    "from_variant_dict",
    "get_scheme",
    "is_structure_complete",
    "parse_enhanced",
    "parse_structure",
    "structure_completeness",
    "to_item_list",
    "to_variant_dict",
    "validate_completeness",
    "ClinicalSectionStructure",
    "EnhancedClinicalStructure",
]
