"""Argument models for the operation catalogue.

Each operation validates its raw argument bag into a frozen pydantic model
of its family (search, entry, link, batch, ...). Validation either returns
that model or raises ``InvalidArguments``; it never touches the network.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Set, Type

from pydantic import (
    BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr,
    ValidationError, create_model,
)

from .errors import InvalidArguments

DEFAULT_MAX_RESULTS = 50
MAX_RESULTS_CEILING = 1000
DEFAULT_ORGANISM_LIMIT = 100
MAX_BATCH_ENTRIES = 50
MAX_INTERACTION_DRUGS = 10

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]
ResultLimit = Annotated[StrictInt, Field(ge=1, le=MAX_RESULTS_CEILING)]

PathwayFormat = Literal['json', 'kgml', 'image', 'conf', 'aaseq', 'ntseq']
BriteFormat = Literal['json', 'htext']
CompoundSearchType = Literal['name', 'formula', 'exact_mass', 'mol_weight']
BriteHierarchy = Literal['br', 'ko', 'jp']
BatchOperation = Literal['info', 'sequence', 'pathway', 'link']


class ToolArguments(BaseModel):
    """Base for validated argument views; unknown keys are ignored."""

    model_config = ConfigDict(frozen=True, extra='ignore')


class DatabaseArgs(ToolArguments):
    database: NonEmptyStr = Field(
        description='Database name (kegg, pathway, brite, module, ko, genes, genome, '
                    'compound, glycan, reaction, enzyme, disease, drug, or organism code)'
    )


class OrganismListArgs(ToolArguments):
    organism_code: Optional[NonEmptyStr] = Field(
        None, description='Only return the organism with this code (e.g., hsa)'
    )
    limit: ResultLimit = Field(
        DEFAULT_ORGANISM_LIMIT,
        description=f'Maximum number of organisms to return (1-{MAX_RESULTS_CEILING}, '
                    f'default: {DEFAULT_ORGANISM_LIMIT})',
    )


class SearchArgs(ToolArguments):
    query: NonEmptyStr = Field(description='Search query')
    max_results: ResultLimit = Field(
        DEFAULT_MAX_RESULTS,
        description=f'Maximum number of results (1-{MAX_RESULTS_CEILING}, default: {DEFAULT_MAX_RESULTS})',
    )


class OrganismSearchArgs(SearchArgs):
    organism_code: Optional[NonEmptyStr] = Field(
        None, description='Organism code to filter results (optional, e.g., hsa, mmu, eco)'
    )


class CompoundSearchArgs(SearchArgs):
    search_type: CompoundSearchType = Field('name', description='Type of search (default: name)')


class BriteSearchArgs(SearchArgs):
    hierarchy_type: BriteHierarchy = Field('br', description='Type of BRITE hierarchy (default: br)')


class EntryArgs(ToolArguments):
    # Published under an operation-specific name, see entry_schema()
    entry_id: NonEmptyStr


class PathwayEntryArgs(EntryArgs):
    format: PathwayFormat = Field('json', description='Output format (default: json)')


class BriteEntryArgs(EntryArgs):
    format: BriteFormat = Field('json', description='Output format (default: json)')


class GeneEntryArgs(EntryArgs):
    include_sequences: StrictBool = Field(
        False, description='Include amino acid and nucleotide sequences (default: false)'
    )


class DrugListArgs(ToolArguments):
    drug_ids: List[NonEmptyStr] = Field(
        min_length=1, max_length=MAX_INTERACTION_DRUGS,
        description=f'Drug IDs to check for interactions (1-{MAX_INTERACTION_DRUGS})',
    )


class OrthologArgs(ToolArguments):
    gene_id: NonEmptyStr = Field(description='Gene ID (e.g., hsa:1956)')
    target_organisms: Optional[List[NonEmptyStr]] = Field(
        None, description='Target organism codes (optional, e.g., [mmu, rno, dme])'
    )


class BatchArgs(ToolArguments):
    entry_ids: List[NonEmptyStr] = Field(
        min_length=1, max_length=MAX_BATCH_ENTRIES,
        description=f'KEGG entry IDs (1-{MAX_BATCH_ENTRIES})',
    )
    operation: BatchOperation = Field('info', description='Operation to perform (default: info)')


class ConversionArgs(ToolArguments):
    source_db: NonEmptyStr = Field(description='Source database (e.g., hsa, ncbi-geneid, uniprot)')
    target_db: NonEmptyStr = Field(description='Target database (e.g., hsa, ncbi-geneid, uniprot)')
    entries: List[NonEmptyStr] = Field(
        default_factory=list, alias='identifiers',
        description='Identifiers to convert (optional, for batch conversion)',
    )


class RelatedEntriesArgs(ToolArguments):
    source_db: NonEmptyStr = Field(description='Source database (e.g., pathway, compound, gene)')
    target_db: NonEmptyStr = Field(description='Target database (e.g., pathway, compound, gene)')
    entries: List[NonEmptyStr] = Field(
        default_factory=list, alias='source_entries',
        description='Source entries to find links for (optional)',
    )


def _describe(error: ValidationError) -> str:
    """One caller-facing sentence for the first validation failure."""
    first = error.errors()[0]
    location = '.'.join(str(part) for part in first['loc']) or 'arguments'
    if first['type'] == 'missing':
        return f"Missing required argument: {location}"
    return f"Invalid argument {location}: {first['msg']}"


class ArgumentSchema:
    """Argument contract of one operation, backed by a pydantic model."""

    def __init__(self, model: Type[ToolArguments]):
        self.model = model

    def validate(self, arguments: Optional[Dict[str, Any]]) -> ToolArguments:
        """Return a typed view of ``arguments`` or raise InvalidArguments."""
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidArguments("Arguments must be an object")

        # An explicit null counts as an absent key
        present = {key: value for key, value in arguments.items() if value is not None}
        try:
            return self.model.model_validate(present)
        except ValidationError as e:
            raise InvalidArguments(_describe(e)) from e

    def json_schema(self) -> Dict[str, Any]:
        return self.model.model_json_schema()

    def text_arguments(self) -> Set[str]:
        """Names of the arguments whose values are plain strings."""
        names = set()
        for name, prop in self.json_schema().get('properties', {}).items():
            types = [prop.get('type')] + [option.get('type') for option in prop.get('anyOf', [])]
            if 'string' in types:
                names.add(name)
        return names


def search_schema(query_description: str, model: Type[SearchArgs] = SearchArgs) -> ArgumentSchema:
    """Schema of a search operation with its own query description."""
    return ArgumentSchema(create_model(
        model.__name__,
        __base__=model,
        query=(NonEmptyStr, Field(description=query_description)),
    ))


def entry_schema(id_name: str, id_description: str, model: Type[EntryArgs] = EntryArgs) -> ArgumentSchema:
    """Schema of an entry operation whose identifier argument is ``id_name``."""
    return ArgumentSchema(create_model(
        model.__name__,
        __base__=model,
        entry_id=(NonEmptyStr, Field(alias=id_name, description=id_description)),
    ))
