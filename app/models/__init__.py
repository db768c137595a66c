from app.models.topology import (  # noqa: F401
    AttachmentRecommendation,
    DeviceSlotInfo,
    DeviceSnapshot,
    DeviceType,
    IssueCode,
    PonType,
    SplitterStage,
    SplitterType,
    TopologyPlan,
    TopologyType,
    ValidationIssue,
    ValidationResult,
)
