from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.topology import (
    DeviceType,
    IssueCode,
    PonType,
    SplitterType,
    TopologyType,
)


class TopologyPlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    subscriber_count: int = Field(
        validation_alias=AliasChoices("subscriber_count", "subscriberCount")
    )
    pon_type: str = Field(
        min_length=1,
        max_length=20,
        validation_alias=AliasChoices("pon_type", "ponType", "oltType"),
    )


class StageRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    device_type: str = Field(
        default="ms", max_length=20, validation_alias=AliasChoices("device_type", "deviceType")
    )
    splitter_type: str | None = Field(
        default=None,
        max_length=20,
        validation_alias=AliasChoices("splitter_type", "splitterType"),
    )


class ExistingTopologyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    pon_type: str = Field(
        min_length=1,
        max_length=20,
        validation_alias=AliasChoices("pon_type", "ponType", "oltType"),
    )
    subscriber_count: int | None = Field(
        default=None, validation_alias=AliasChoices("subscriber_count", "subscriberCount")
    )
    stages: list[StageRecord] = Field(default_factory=list)


class DeviceSnapshotPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    device_id: str = Field(
        min_length=1, validation_alias=AliasChoices("device_id", "deviceId", "id")
    )
    device_type: str = Field(validation_alias=AliasChoices("device_type", "deviceType"))
    type_code: str | None = Field(
        default=None,
        max_length=40,
        validation_alias=AliasChoices("type_code", "oltType", "msType", "submsType"),
    )
    declared_total_ports: int | None = Field(
        default=None, validation_alias=AliasChoices("declared_total_ports", "totalPorts")
    )
    active_ports: int = Field(
        default=0, validation_alias=AliasChoices("active_ports", "activePorts")
    )
    name: str | None = Field(default=None, max_length=160)
    parent_id: str | None = Field(
        default=None, validation_alias=AliasChoices("parent_id", "parentId")
    )


class PortAllocationRequest(BaseModel):
    devices: list[DeviceSnapshotPayload] = Field(default_factory=list)
    connected_only: bool = False


class SplitterStageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    stage_index: int
    splitter_type: SplitterType | None
    splitter_label: str
    insertion_loss_db: float
    cumulative_loss_db: float
    device_role: DeviceType
    output_ports: int
    can_add_more: bool


class TopologyPlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subscriber_count: int
    pon_type: PonType
    topology_type: TopologyType
    stages: list[SplitterStageRead]
    total_loss_db: float
    capacity_limit: int
    max_subscribers: int
    saturated: bool
    message: str


class ValidationIssueRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    code: IssueCode
    message: str


class ValidationResultRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    errors: list[ValidationIssueRead]
    warnings: list[ValidationIssueRead]


class TopologyPlanResponse(BaseModel):
    topology: TopologyPlanRead
    validation: ValidationResultRead
    recommendations: list[str]
    diagram: dict
    rules: dict


class ExistingTopologyResponse(BaseModel):
    topology: TopologyPlanRead
    validation: ValidationResultRead
    recommendations: list[str]


class TopologyExampleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    topology: TopologyPlanRead
    validation: ValidationResultRead


class DeviceSnapshotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device_id: str
    device_type: DeviceType
    type_code: str | None
    declared_total_ports: int | None
    active_ports: int
    name: str | None
    parent_id: str | None


class DeviceSlotRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    device: DeviceSnapshotRead
    inferred_total_ports: int
    total_ports: int
    available_ports: int
    type_recognized: bool


class AttachmentRecommendationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    best_olt: list[DeviceSlotRead]
    best_ms: list[DeviceSlotRead]
    best_subms: list[DeviceSlotRead]
    optimal_path: list[DeviceSlotRead]


class PortSummaryRead(BaseModel):
    total_capacity: int
    total_active: int
    total_available: int
    utilization_percentage: int


class PortAllocationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    summary: PortSummaryRead
    devices_with_available_slots: list[DeviceSlotRead]
    attachment: AttachmentRecommendationRead
    recommendations: list[str]
