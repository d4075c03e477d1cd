import copy

import pytest

from reports_studio.core.errors import UnknownBlockType, ValidationError
from reports_studio.db.default_templates import DEFAULT_TEMPLATES
from reports_studio.schemas.validation import (
    is_valid_template,
    validate_branding,
    validate_settings,
    validate_template,
)


def _raw(template_id="quotation_default_v1"):
    template = next(t for t in DEFAULT_TEMPLATES if t.id == template_id)
    return copy.deepcopy(template.model_dump(by_alias=True, mode="json"))


class TestValidateTemplate:
    def test_every_shipped_default_is_valid(self):
        for template in DEFAULT_TEMPLATES:
            assert is_valid_template(template.to_json_dict())

    def test_validated_template_round_trips_to_the_same_json(self):
        raw = _raw()
        first = validate_template(raw)
        assert validate_template(first.to_json_dict()) == first

    def test_instance_is_returned_unchanged(self):
        template = DEFAULT_TEMPLATES[0]
        assert validate_template(template) is template

    def test_unknown_block_type_is_reported_with_its_path(self):
        raw = _raw()
        raw["blocks"][2]["type"] = "barcode"
        with pytest.raises(UnknownBlockType) as info:
            validate_template(raw)
        assert info.value.block_type == "barcode"
        assert info.value.issues[0].path == "blocks.2.type"

    def test_unknown_block_type_is_a_validation_error(self):
        raw = _raw()
        raw["blocks"][0]["type"] = "chart"
        assert not is_valid_template(raw)

    def test_bad_theme_color_is_rejected(self):
        raw = _raw()
        raw["theme"]["primaryColor"] = "cyan"
        with pytest.raises(ValidationError) as info:
            validate_template(raw)
        assert [issue.path for issue in info.value.issues] == ["theme.primaryColor"]

    def test_three_digit_hex_color_is_accepted(self):
        raw = _raw()
        raw["theme"]["accentColor"] = "#abc"
        assert validate_template(raw).theme.accent_color == "#abc"

    def test_missing_page_margin_defaults_to_ten(self):
        raw = _raw()
        del raw["page"]["marginMm"]
        assert validate_template(raw).page.margin_mm == 10

    def test_grid_out_of_range_is_rejected(self):
        raw = _raw()
        raw["page"]["gridPx"] = 2
        assert not is_valid_template(raw)

    def test_thermal_width_bounds(self):
        raw = _raw("receipt_short_default_v1")
        raw["page"]["mode"] = "THERMAL"
        raw["page"]["thermalMm"] = {"widthMm": 58, "marginMm": 2}
        assert validate_template(raw).page.thermal_mm.width_mm == 58
        raw["page"]["thermalMm"] = {"widthMm": 200, "marginMm": 2}
        assert not is_valid_template(raw)

    def test_duplicate_block_ids_are_rejected(self):
        raw = _raw()
        raw["blocks"][1]["id"] = raw["blocks"][0]["id"]
        assert not is_valid_template(raw)

    def test_title_requires_english_title(self):
        raw = _raw()
        raw["blocks"][1]["props"]["titleEn"] = ""
        with pytest.raises(ValidationError) as info:
            validate_template(raw)
        assert info.value.issues[0].path == "blocks.1.props.titleEn"

    def test_unknown_doc_type_is_rejected(self):
        raw = _raw()
        raw["docType"] = "invoice"
        assert not is_valid_template(raw)

    def test_unknown_fields_are_ignored(self):
        raw = _raw()
        raw["legacyField"] = True
        assert validate_template(raw).id == "quotation_default_v1"


class TestValidateBranding:
    def test_company_name_is_trimmed_and_required(self):
        assert validate_branding({"companyName": "  ACME  "}).company_name == "ACME"
        with pytest.raises(ValidationError):
            validate_branding({"companyName": "   "})

    def test_defaults_fill_missing_fields(self):
        branding = validate_branding({"companyName": "ACME"})
        assert branding.default_primary_color == "#26D6F0"
        assert branding.head_office_label == "(Head Office)"

    def test_bad_color_is_rejected(self):
        with pytest.raises(ValidationError):
            validate_branding({"companyName": "ACME", "defaultAccentColor": "blue"})


class TestValidateSettings:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            validate_settings({"dtoTimeoutMs": 0})

    def test_default_template_ids(self):
        settings = validate_settings({})
        assert settings.default_template_id_by_doc_type["quotation"] == "quotation_default_v1"
        assert settings.pdf_service_url == "/api/v1/print/pdf"
