"""
Vehicle authorization entity definitions.

Normalizes the nested application JSON documents into 19 tables:
- Independent lookups (addresses, contact details, documents)
- Parties (contact persons, billing information, bodies)
- The central Applications table
- Per-application children (issues, bodies, vehicle types, staff)
- Per-vehicle-type children (vehicles, rules, member state and agency mappings)
- Mapping values and requirements

Column names follow the JSON paths they are loaded from, e.g.
contactPerson.userAddress.id -> ContactPersons.AddressID.
"""

from .utils import (
    EntityDefinition,
    counter,
    fk,
    flag,
    idx,
    memo,
    text,
    timestamp,
)

ID_LENGTH = 50
CODE_LENGTH = 10


# ============================================================================
# INDEPENDENT ENTITIES
# ============================================================================

ADDRESSES = EntityDefinition(
    name="Addresses",
    fields=(
        text("AddressID", ID_LENGTH, nullable=False),
        text("Street"),
        text("City", 100),
        text("PostalCode", 20),
        text("CountryCode", CODE_LENGTH),
    ),
    primary_key=("AddressID",),
    description="Postal addresses shared by contact persons, billing records and bodies",
)

CONTACT_DETAILS = EntityDefinition(
    name="ContactDetails",
    fields=(
        text("ContactDetailsID", ID_LENGTH, nullable=False),
        text("Phone", 50),
        text("Fax", 50),
        text("Email"),
        text("Website"),
    ),
    primary_key=("ContactDetailsID",),
    description="Phone, fax, e-mail and website blocks",
)

DOCUMENTS = EntityDefinition(
    name="Documents",
    fields=(
        text("DocumentID", ID_LENGTH, nullable=False),
        text("FileTitle"),
        memo("FilePath"),
        timestamp("UploadDate"),
    ),
    primary_key=("DocumentID",),
    description="Uploaded evidence documents referenced by mapping values",
)

# ============================================================================
# FIRST-TIER DEPENDENTS - parties
# ============================================================================

CONTACT_PERSONS = EntityDefinition(
    name="ContactPersons",
    fields=(
        text("ContactPersonID", ID_LENGTH, nullable=False),
        text("FirstName", 100),
        text("Surname", 100),
        text("TitleOrFunction"),
        text("AddressID", ID_LENGTH),
        text("ContactDetailsID", ID_LENGTH),
        text("LanguagesSpoken"),
        text("PersonType", 50),
    ),
    primary_key=("ContactPersonID",),
    description="Applicant and financial contact persons",
)

BILLING_INFORMATION = EntityDefinition(
    name="BillingInformation",
    fields=(
        text("BillingID", ID_LENGTH, nullable=False),
        text("LegalDenomination"),
        text("Acronym", 50),
        text("VATNumber", 50),
        text("NationalRegNumber", 100),
        text("AddressID", ID_LENGTH),
        text("ContactDetailsID", ID_LENGTH),
        memo("SpecificBillingRequirements"),
    ),
    primary_key=("BillingID",),
    description="Invoicing party of an application",
)

BODIES = EntityDefinition(
    name="Bodies",
    fields=(
        text("BodyID", ID_LENGTH, nullable=False),
        text("BodyType", 50),
        text("LegalDenomination"),
        text("Acronym", 50),
        text("VATNumber", 50),
        text("NationalRegNumber", 100),
        text("AddressID", ID_LENGTH),
        text("ContactDetailsID", ID_LENGTH),
        memo("AdditionalInfo"),
        text("BodyName"),
        text("BodyIdNumber", 100),
        text("EINNumber", 100),
    ),
    primary_key=("BodyID",),
    description="Applicant bodies, assessment bodies and authorization holders",
)

# ============================================================================
# CENTRAL ENTITY
# ============================================================================

APPLICATIONS = EntityDefinition(
    name="Applications",
    fields=(
        text("ApplicationID", ID_LENGTH, nullable=False),
        text("ID", ID_LENGTH),
        text("CaseType", 50),
        text("NationalRegNumber", 100),
        text("ProjectName"),
        text("ApplicationType", 100),
        text("ApplicationTypeVariantVersion", 100),
        text("IssuingAuthority"),
        text("ApplicationStatus", 50),
        text("Phase", 50),
        text("EIN", 100),
        text("LegalDenomination"),
        text("VehicleIdentifier", 100),
        text("MemberStates"),
        text("Subcategory", 100),
        text("PreEngagementID", ID_LENGTH),
        memo("PreEngagementOtherInformation"),
        text("DocLang", CODE_LENGTH),
        text("ApplicationVersion", 20),
        text("ContactPersonID", ID_LENGTH),
        text("FinancialContactPersonID", ID_LENGTH),
        text("BillingInformationID", ID_LENGTH),
        text("ApplicantBodyID", ID_LENGTH),
        timestamp("SubmissionDate"),
        timestamp("LastModifiedDate"),
    ),
    primary_key=("ApplicationID",),
    description="One vehicle authorization application (root of the JSON document)",
)

# ============================================================================
# SECOND-TIER DEPENDENTS - per application
# ============================================================================

ISSUES = EntityDefinition(
    name="Issues",
    fields=(
        text("IssueID", ID_LENGTH, nullable=False),
        text("ID", ID_LENGTH),
        text("ApplicationID", ID_LENGTH, nullable=False),
        text("Title"),
        memo("IssueDescription"),
        text("Owner", 100),
        text("OwnerDisplayName"),
        text("Assignees"),
        text("AssigneesDisplayNames"),
        text("IssueType", 50),
        text("IssueStatus", 50),
        text("Resolution", 50),
        text("AssessmentStage", 50),
        memo("ResolutionText"),
        memo("ResolutionDescription"),
        timestamp("CreatedDate"),
        timestamp("ResolvedDate"),
    ),
    primary_key=("IssueID",),
    description="Assessment issues raised against an application",
)

APPLICATION_BODIES = EntityDefinition(
    name="ApplicationBodies",
    fields=(
        text("ApplicationID", ID_LENGTH, nullable=False),
        text("BodyID", ID_LENGTH, nullable=False),
        text("BodyRole", 50, nullable=False),
    ),
    primary_key=("ApplicationID", "BodyID", "BodyRole"),
    description="Bodies involved in an application and the role each plays",
)

VEHICLE_TYPES = EntityDefinition(
    name="VehicleTypes",
    fields=(
        text("VehicleTypeID", ID_LENGTH, nullable=False),
        text("ApplicationID", ID_LENGTH, nullable=False),
        text("AuthorizationType", 100),
        text("VehicleType", 100),
        text("TypeID", 100),
        text("TypeName"),
        text("AltTypeName"),
        text("ReferenceToExistingStr"),
        memo("DescriptionNew"),
        text("VehicleIdentifier", 100),
        text("VehicleValue", 100),
        text("AuthorizationHolderID", ID_LENGTH),
        text("VehicleMainCategory", 100),
        text("VehicleSubCategory", 100),
        memo("NonCodedRestrictions"),
        memo("CodedRestrictions"),
        memo("ChangeSummary"),
        text("RegistrationEntityRecipients"),
        flag("IsNewType"),
    ),
    primary_key=("VehicleTypeID",),
    description="Vehicle types and variants covered by an application",
)

APPLICATION_STAFF = EntityDefinition(
    name="ApplicationStaff",
    fields=(
        counter("StaffID"),
        text("ApplicationID", ID_LENGTH, nullable=False),
        text("StaffType", 50),
        text("StaffName"),
    ),
    primary_key=("StaffID",),
    description="Agency and NSA staff assigned to an application",
)

# ============================================================================
# THIRD-TIER DEPENDENTS - per vehicle type
# ============================================================================

VEHICLES_TO_AUTHORISE = EntityDefinition(
    name="VehiclesToAuthorise",
    fields=(
        text("VehicleToAuthoriseID", ID_LENGTH, nullable=False),
        text("VehicleTypeID", ID_LENGTH, nullable=False),
        text("VehicleValue", 100),
        text("VehicleIdentifier", 100),
    ),
    primary_key=("VehicleToAuthoriseID",),
    description="Individual vehicles requested under a vehicle type",
)

APPLICABLE_RULES = EntityDefinition(
    name="ApplicableRules",
    fields=(
        text("RuleID", ID_LENGTH, nullable=False),
        text("VehicleTypeID", ID_LENGTH, nullable=False),
        text("RuleType", 50),
        text("MSCode", CODE_LENGTH),
        memo("Comment"),
        text("Directive"),
        flag("IsApplicable"),
    ),
    primary_key=("RuleID",),
    description="Applicable national and EU rules per vehicle type",
)

MEMBER_STATE_MAPPINGS = EntityDefinition(
    name="MemberStateMappings",
    fields=(
        text("MappingID", ID_LENGTH, nullable=False),
        text("VehicleTypeID", ID_LENGTH, nullable=False),
        text("CountryCode", CODE_LENGTH),
        text("Name"),
        text("ShuntingOnlyTxt"),
        flag("ShuntingOnly"),
        memo("OtherDescription"),
        text("AssigneeStr"),
    ),
    primary_key=("MappingID",),
    description="Area of use per member state for a vehicle type",
)

AGENCY_MAPPINGS = EntityDefinition(
    name="AgencyMappings",
    fields=(
        text("AgencyMappingID", ID_LENGTH, nullable=False),
        text("VehicleTypeID", ID_LENGTH, nullable=False),
        text("Requirement"),
        memo("RequirementDescr"),
    ),
    primary_key=("AgencyMappingID",),
    description="Agency requirements mapped to a vehicle type",
)

# ============================================================================
# FOURTH-TIER DEPENDENTS - mapping values and requirements
# ============================================================================

NETWORKS = EntityDefinition(
    name="Networks",
    fields=(
        counter("NetworkID"),
        text("MappingID", ID_LENGTH, nullable=False),
        text("NetworkName"),
    ),
    primary_key=("NetworkID",),
    description="Networks listed under a member state mapping",
)

AGENCY_MAPPING_VALUES = EntityDefinition(
    name="AgencyMappingValues",
    fields=(
        text("ValueID", ID_LENGTH, nullable=False),
        text("AgencyMappingID", ID_LENGTH, nullable=False),
        text("DocumentID", ID_LENGTH),
        memo("ValueDescription"),
        memo("ValueText"),
    ),
    primary_key=("ValueID",),
    description="Evidence values answering an agency requirement",
)

MS_MAPPING_REQUIREMENTS = EntityDefinition(
    name="MSMappingRequirements",
    fields=(
        text("RequirementID", ID_LENGTH, nullable=False),
        text("MappingID", ID_LENGTH, nullable=False),
        text("Requirement"),
        memo("RequirementDescr"),
    ),
    primary_key=("RequirementID",),
    description="National requirements attached to a member state mapping",
)

MS_MAPPING_REQUIREMENT_VALUES = EntityDefinition(
    name="MSMappingRequirementValues",
    fields=(
        text("ValueID", ID_LENGTH, nullable=False),
        text("RequirementID", ID_LENGTH, nullable=False),
        text("DocumentID", ID_LENGTH),
        memo("ValueDescription"),
        memo("ValueText"),
    ),
    primary_key=("ValueID",),
    description="Evidence values answering a national requirement",
)


VEHICLE_AUTH_ENTITIES = (
    ADDRESSES,
    CONTACT_DETAILS,
    DOCUMENTS,
    CONTACT_PERSONS,
    BILLING_INFORMATION,
    BODIES,
    APPLICATIONS,
    ISSUES,
    APPLICATION_BODIES,
    VEHICLE_TYPES,
    APPLICATION_STAFF,
    VEHICLES_TO_AUTHORISE,
    APPLICABLE_RULES,
    MEMBER_STATE_MAPPINGS,
    AGENCY_MAPPINGS,
    NETWORKS,
    AGENCY_MAPPING_VALUES,
    MS_MAPPING_REQUIREMENTS,
    MS_MAPPING_REQUIREMENT_VALUES,
)

# Relationships are created in this order after every table exists.
VEHICLE_AUTH_FOREIGN_KEYS = (
    fk("ContactPersons", "AddressID", "Addresses"),
    fk("ContactPersons", "ContactDetailsID", "ContactDetails"),
    fk("BillingInformation", "AddressID", "Addresses"),
    fk("BillingInformation", "ContactDetailsID", "ContactDetails"),
    fk("Bodies", "AddressID", "Addresses"),
    fk("Bodies", "ContactDetailsID", "ContactDetails"),
    fk("Applications", "ContactPersonID", "ContactPersons"),
    fk("Applications", "FinancialContactPersonID", "ContactPersons", "ContactPersonID"),
    fk("Applications", "BillingInformationID", "BillingInformation", "BillingID"),
    fk("Applications", "ApplicantBodyID", "Bodies", "BodyID"),
    fk("Issues", "ApplicationID", "Applications"),
    fk("ApplicationBodies", "ApplicationID", "Applications"),
    fk("ApplicationBodies", "BodyID", "Bodies"),
    fk("VehicleTypes", "ApplicationID", "Applications"),
    # Holders are often registered outside this application, so the reference
    # is documented but not enforced.
    fk("VehicleTypes", "AuthorizationHolderID", "Bodies", "BodyID", enforced=False),
    fk("ApplicationStaff", "ApplicationID", "Applications"),
    fk("VehiclesToAuthorise", "VehicleTypeID", "VehicleTypes"),
    fk("ApplicableRules", "VehicleTypeID", "VehicleTypes"),
    fk("MemberStateMappings", "VehicleTypeID", "VehicleTypes"),
    fk("AgencyMappings", "VehicleTypeID", "VehicleTypes"),
    fk("Networks", "MappingID", "MemberStateMappings"),
    fk("AgencyMappingValues", "AgencyMappingID", "AgencyMappings"),
    fk("AgencyMappingValues", "DocumentID", "Documents"),
    fk("MSMappingRequirements", "MappingID", "MemberStateMappings"),
    fk("MSMappingRequirementValues", "RequirementID", "MSMappingRequirements"),
    fk("MSMappingRequirementValues", "DocumentID", "Documents"),
)

VEHICLE_AUTH_INDEXES = (
    idx("ContactPersons", "AddressID"),
    idx("ContactPersons", "ContactDetailsID"),
    idx("BillingInformation", "AddressID"),
    idx("Bodies", "AddressID"),
    idx("Applications", "ApplicationStatus"),
    idx("Applications", "NationalRegNumber"),
    idx("Applications", "ContactPersonID"),
    idx("Applications", "ApplicantBodyID"),
    idx("Issues", "ApplicationID"),
    idx("Issues", "IssueStatus"),
    idx("ApplicationBodies", "BodyID"),
    idx("VehicleTypes", "ApplicationID"),
    idx("VehicleTypes", "TypeID"),
    idx("ApplicationStaff", "ApplicationID"),
    idx("VehiclesToAuthorise", "VehicleTypeID"),
    idx("ApplicableRules", "VehicleTypeID"),
    idx("MemberStateMappings", "VehicleTypeID"),
    idx("MemberStateMappings", "CountryCode"),
    idx("AgencyMappings", "VehicleTypeID"),
    idx("Networks", "MappingID"),
    idx("AgencyMappingValues", "AgencyMappingID"),
    idx("MSMappingRequirements", "MappingID"),
    idx("MSMappingRequirementValues", "RequirementID"),
)

# Tie-break order for entities whose dependencies are all satisfied.
CREATION_PRIORITY = (
    "Addresses",
    "ContactDetails",
    "Documents",
    "ContactPersons",
    "BillingInformation",
    "Bodies",
    "Applications",
    "Issues",
    "ApplicationBodies",
    "VehicleTypes",
    "ApplicationStaff",
    "VehiclesToAuthorise",
    "ApplicableRules",
    "MemberStateMappings",
    "AgencyMappings",
    "Networks",
    "AgencyMappingValues",
    "MSMappingRequirements",
    "MSMappingRequirementValues",
)

CENTRAL_ENTITY = "Applications"
