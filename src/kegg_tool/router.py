"""Operation catalogue and request routing onto KEGG REST endpoints."""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from itertools import islice
from typing import Any, Callable, Dict, List, Optional, Union

from . import endpoints
from .batch import collect_outcomes, summarize
from .errors import ErrorHandler, KEGGToolError, RemoteCallFailure, UnknownOperation
from .gateway import KEGGGateway
from .logging_config import get_logger
from .parsers import Listing, Record, parse_entry, parse_listing, parse_pairs
from .validators import (
    ArgumentSchema, BatchArgs, BriteEntryArgs, BriteSearchArgs,
    CompoundSearchArgs, ConversionArgs, DatabaseArgs, DrugListArgs, EntryArgs,
    GeneEntryArgs, OrganismListArgs, OrganismSearchArgs, OrthologArgs,
    PathwayEntryArgs, RelatedEntriesArgs, SearchArgs, entry_schema, search_schema,
)

logger = get_logger('router')

SEQUENCE_FORMATS = ('aaseq', 'ntseq')


def truncate(listing: Listing, max_results: int) -> Listing:
    """Keep the first ``max_results`` entries of a listing, in order."""
    return dict(islice(listing.items(), max_results))


@dataclass(frozen=True)
class OperationDescriptor:
    """Static description of one caller-invocable operation."""
    name: str
    description: str
    schema: ArgumentSchema
    handler: Callable[['KEGGRouter', Any], Dict[str, Any]]
    # Completes "Failed to ..." in wrapped remote errors
    action: str

    def catalogue_entry(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'description': self.description,
            'inputSchema': self.schema.json_schema(),
        }


class KEGGRouter:
    """Validates operation arguments, calls KEGG and shapes the results."""

    def __init__(self, gateway: KEGGGateway, error_handler: Optional[ErrorHandler] = None):
        self.gateway = gateway
        self.error_handler = error_handler or ErrorHandler()

    def execute(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run operation ``name`` with raw caller ``arguments``.

        Raises:
            UnknownOperation: ``name`` is not in the catalogue
            InvalidArguments: arguments fail the operation's schema
            RemoteCallFailure: a required remote call failed
        """
        descriptor = OPERATIONS.get(name)
        if descriptor is None:
            raise UnknownOperation(f"Unknown tool: {name}")

        args = descriptor.schema.validate(arguments)
        logger.debug(f"Executing {name} with {args}")

        try:
            return descriptor.handler(self, args)
        except RemoteCallFailure as e:
            raise RemoteCallFailure(
                f"Failed to {descriptor.action}: {e}",
                endpoint=e.endpoint,
                status_code=e.status_code,
            ) from e

    # Remote-call primitives

    def fetch_listing(self, path: str) -> Listing:
        return parse_listing(self.gateway.fetch_text(path))

    def fetch_record(self, path: str) -> Record:
        return parse_entry(self.gateway.fetch_text(path))

    # Database information

    def database_info(self, args: DatabaseArgs) -> Dict[str, Any]:
        info = self.gateway.fetch_text(endpoints.info_path(args.database))
        return {'database': args.database, 'info': info}

    def list_organisms(self, args: OrganismListArgs) -> Dict[str, Any]:
        organisms = self.fetch_listing(endpoints.list_path('organism'))
        if args.organism_code:
            # Each description starts with the organism code column
            organisms = {
                key: value for key, value in organisms.items()
                if value.split('\t', 1)[0] == args.organism_code
            }
        limited = truncate(organisms, args.limit)

        result = {
            'total_organisms': len(organisms),
            'returned_count': len(limited),
            'organisms': limited,
        }
        if args.organism_code:
            result['organism_code'] = args.organism_code
        return result

    # Search-class operations

    def _search(self, args: SearchArgs, database: str, result_key: str,
                option: Optional[str] = None, **echo: Any) -> Dict[str, Any]:
        results = self.fetch_listing(endpoints.find_path(database, args.query, option))
        limited = truncate(results, args.max_results)

        envelope: Dict[str, Any] = {'query': args.query}
        envelope.update(echo)
        envelope['total_found'] = len(results)
        envelope['returned_count'] = len(limited)
        envelope[result_key] = limited
        return envelope

    def search_database(self, args: SearchArgs, database: str, result_key: str) -> Dict[str, Any]:
        return self._search(args, database, result_key)

    def search_pathways(self, args: OrganismSearchArgs) -> Dict[str, Any]:
        database = f"pathway/{args.organism_code}" if args.organism_code else 'pathway'
        return self._search(args, database, 'pathways', database=database)

    def search_genes(self, args: OrganismSearchArgs) -> Dict[str, Any]:
        database = args.organism_code or 'genes'
        return self._search(args, database, 'genes', database=database)

    def search_compounds(self, args: CompoundSearchArgs) -> Dict[str, Any]:
        option = None if args.search_type == 'name' else args.search_type
        return self._search(args, 'compound', 'compounds', option, search_type=args.search_type)

    def search_brite(self, args: BriteSearchArgs) -> Dict[str, Any]:
        return self._search(args, 'brite', 'brite_entries', hierarchy_type=args.hierarchy_type)

    # Get-class operations

    def get_entry(self, args: EntryArgs) -> Record:
        return self.fetch_record(endpoints.get_path(args.entry_id))

    def get_formatted_entry(self, args: EntryArgs, id_key: str) -> Dict[str, Any]:
        """Record for ``json``; the unparsed remote payload otherwise."""
        if args.format == 'json':
            return self.get_entry(args)

        path = endpoints.get_path(args.entry_id, args.format)
        if args.format == 'image':
            content = self.gateway.fetch_bytes(path)
        else:
            content = self.gateway.fetch_text(path)
        return {id_key: args.entry_id, 'format': args.format, 'content': content}

    def get_gene_info(self, args: GeneEntryArgs) -> Record:
        record = self.get_entry(args)
        if args.include_sequences:
            record.update(self._fetch_sequences(args.entry_id))
        return record

    def _fetch_sequences(self, gene_id: str) -> Dict[str, str]:
        """Fetch both sequences concurrently; a failed one is left out."""
        sequences = {}
        with ThreadPoolExecutor(max_workers=len(SEQUENCE_FORMATS)) as executor:
            futures = [
                (kind, executor.submit(self.gateway.fetch_text, endpoints.get_path(gene_id, kind)))
                for kind in SEQUENCE_FORMATS
            ]
            for kind, future in futures:
                try:
                    text = future.result()
                except KEGGToolError as e:
                    logger.debug(f"{kind} unavailable for {gene_id}: {e}")
                    continue
                if text:
                    sequences[kind] = text
        return sequences

    # Link-class operations

    def linked_entries(self, args: EntryArgs, target_db: str, id_key: str,
                       count_key: str, result_key: str) -> Dict[str, Any]:
        links = self.fetch_listing(endpoints.link_path(target_db, args.entry_id))
        return {id_key: args.entry_id, count_key: len(links), result_key: links}

    def drug_interactions(self, args: DrugListArgs) -> Dict[str, Any]:
        interactions = self.fetch_listing(endpoints.ddi_path(args.drug_ids))
        return {
            'drug_ids': list(args.drug_ids),
            'interaction_count': len(interactions),
            'interactions': interactions,
        }

    def gene_orthologs(self, args: OrthologArgs) -> Dict[str, Any]:
        """KO assignments of a gene, optionally resolved to genes in other organisms.

        With target organisms, one link call is made per (KO, organism)
        pair, one after another; pairs that fail are left out.
        """
        ko_pairs = parse_pairs(self.gateway.fetch_text(endpoints.link_path('ko', args.gene_id)))
        orthologs: Dict[str, str] = dict(ko_pairs)

        if args.target_organisms is not None:
            ko_ids = list(dict.fromkeys(ko for _, ko in ko_pairs))
            fan_out = [(ko, org) for ko in ko_ids for org in args.target_organisms]
            outcomes = collect_outcomes(
                fan_out,
                lambda pair: parse_pairs(self.gateway.fetch_text(endpoints.link_path(pair[1], pair[0]))),
                operation='get_gene_orthologs',
                item_id_func=lambda pair: f"{pair[0]}/{pair[1]}",
                error_handler=self.error_handler,
            )
            orthologs = {}
            for outcome in outcomes:
                if outcome.success:
                    for ko, gene in outcome.data:
                        orthologs[gene] = ko

        result: Dict[str, Any] = {'gene_id': args.gene_id}
        if args.target_organisms is not None:
            result['target_organisms'] = list(args.target_organisms)
        result['ortholog_count'] = len(orthologs)
        result['orthologs'] = orthologs
        return result

    # Batch lookup

    def _lookup_entry(self, entry_id: str, operation: str) -> Any:
        if operation == 'sequence':
            return self.gateway.fetch_text(endpoints.get_path(entry_id, 'aaseq'))
        if operation == 'pathway':
            return self.fetch_listing(endpoints.link_path('pathway', entry_id))
        if operation == 'link':
            return self.fetch_listing(endpoints.link_path('ko', entry_id))
        return self.fetch_record(endpoints.get_path(entry_id))

    def batch_lookup(self, args: BatchArgs) -> Dict[str, Any]:
        outcomes = collect_outcomes(
            args.entry_ids,
            lambda entry_id: self._lookup_entry(entry_id, args.operation),
            operation=f"batch_entry_lookup[{args.operation}]",
            error_handler=self.error_handler,
        )
        envelope: Dict[str, Any] = {'operation': args.operation}
        envelope.update(summarize(outcomes))
        envelope['results'] = [outcome.to_dict() for outcome in outcomes]
        return envelope

    # Cross references

    def _cross_reference(self, args: Union[ConversionArgs, RelatedEntriesArgs], build_path: Callable[[str, str], str],
                         count_key: str, result_key: str) -> Dict[str, Any]:
        if args.entries:
            path = build_path(args.target_db, endpoints.join_entries(args.entries))
        else:
            path = build_path(args.target_db, args.source_db)
        mapping = self.fetch_listing(path)
        return {
            'source_db': args.source_db,
            'target_db': args.target_db,
            count_key: len(mapping),
            result_key: mapping,
        }

    def convert_identifiers(self, args: ConversionArgs) -> Dict[str, Any]:
        return self._cross_reference(args, endpoints.conv_path, 'conversion_count', 'conversions')

    def find_related_entries(self, args: RelatedEntriesArgs) -> Dict[str, Any]:
        return self._cross_reference(args, endpoints.link_path, 'link_count', 'links')


def _search_operation(name: str, database: str, result_key: str, description: str,
                      query_description: str, action: str) -> OperationDescriptor:
    return OperationDescriptor(
        name, description, search_schema(query_description),
        partial(KEGGRouter.search_database, database=database, result_key=result_key),
        action,
    )


def _get_operation(name: str, id_name: str, description: str, id_description: str,
                   action: str) -> OperationDescriptor:
    return OperationDescriptor(
        name, description, entry_schema(id_name, id_description),
        KEGGRouter.get_entry, action,
    )


def _link_operation(name: str, id_name: str, target_db: str, count_key: str, result_key: str,
                    description: str, id_description: str, action: str) -> OperationDescriptor:
    return OperationDescriptor(
        name, description, entry_schema(id_name, id_description),
        partial(KEGGRouter.linked_entries, target_db=target_db, id_key=id_name,
                count_key=count_key, result_key=result_key),
        action,
    )


_CATALOGUE: List[OperationDescriptor] = [
    # Database information
    OperationDescriptor(
        'get_database_info',
        'Get release information and statistics for any KEGG database',
        ArgumentSchema(DatabaseArgs),
        KEGGRouter.database_info, 'get database info',
    ),
    OperationDescriptor(
        'list_organisms',
        'Get all KEGG organisms with codes and names',
        ArgumentSchema(OrganismListArgs),
        KEGGRouter.list_organisms, 'list organisms',
    ),

    # Pathways
    OperationDescriptor(
        'search_pathways',
        'Search pathways by keywords or pathway names',
        search_schema('Search query (pathway name, keywords, or description)', OrganismSearchArgs),
        KEGGRouter.search_pathways, 'search pathways',
    ),
    OperationDescriptor(
        'get_pathway_info',
        'Get detailed information for a specific pathway',
        entry_schema('pathway_id', 'Pathway ID (e.g., map00010, hsa00010, ko00010)', PathwayEntryArgs),
        partial(KEGGRouter.get_formatted_entry, id_key='pathway_id'), 'get pathway info',
    ),
    _link_operation('get_pathway_genes', 'pathway_id', 'genes', 'gene_count', 'genes',
                    'Get all genes involved in a specific pathway',
                    'Pathway ID (e.g., hsa00010, mmu00010)', 'get pathway genes'),

    # Genes
    OperationDescriptor(
        'search_genes',
        'Search genes by name, symbol, or keywords',
        search_schema('Search query (gene name, symbol, or keywords)', OrganismSearchArgs),
        KEGGRouter.search_genes, 'search genes',
    ),
    OperationDescriptor(
        'get_gene_info',
        'Get detailed information for a specific gene',
        entry_schema('gene_id', 'Gene ID (e.g., hsa:1956, mmu:11651, eco:b0008)', GeneEntryArgs),
        KEGGRouter.get_gene_info, 'get gene info',
    ),

    # Compounds
    OperationDescriptor(
        'search_compounds',
        'Search compounds by name, formula, or chemical structure',
        search_schema('Search query (compound name, formula, or identifier)', CompoundSearchArgs),
        KEGGRouter.search_compounds, 'search compounds',
    ),
    _get_operation('get_compound_info', 'compound_id',
                   'Get detailed information for a specific compound',
                   'Compound ID (e.g., C00002, C00031, cpd:C00002)', 'get compound info'),

    # Reactions and enzymes
    _search_operation('search_reactions', 'reaction', 'reactions',
                      'Search biochemical reactions by keywords or reaction components',
                      'Search query (reaction name, enzyme, or compound)', 'search reactions'),
    _get_operation('get_reaction_info', 'reaction_id',
                   'Get detailed information for a specific reaction',
                   'Reaction ID (e.g., R00001, R00002)', 'get reaction info'),
    _search_operation('search_enzymes', 'enzyme', 'enzymes',
                      'Search enzymes by EC number or enzyme name',
                      'Search query (EC number or enzyme name)', 'search enzymes'),
    _get_operation('get_enzyme_info', 'ec_number',
                   'Get detailed enzyme information by EC number',
                   'EC number (e.g., ec:1.1.1.1)', 'get enzyme info'),

    # Diseases and drugs
    _search_operation('search_diseases', 'disease', 'diseases',
                      'Search human diseases by name or keywords',
                      'Search query (disease name or keywords)', 'search diseases'),
    _get_operation('get_disease_info', 'disease_id',
                   'Get detailed information for a specific disease',
                   'Disease ID (e.g., H00001, H00002)', 'get disease info'),
    _search_operation('search_drugs', 'drug', 'drugs',
                      'Search drugs by name, target, or indication',
                      'Search query (drug name, target, or indication)', 'search drugs'),
    _get_operation('get_drug_info', 'drug_id',
                   'Get detailed information for a specific drug',
                   'Drug ID (e.g., D00001, D00002)', 'get drug info'),
    OperationDescriptor(
        'get_drug_interactions',
        'Find adverse drug-drug interactions',
        ArgumentSchema(DrugListArgs),
        KEGGRouter.drug_interactions, 'get drug interactions',
    ),

    # Modules and orthology
    _search_operation('search_modules', 'module', 'modules',
                      'Search KEGG modules by name or function',
                      'Search query (module name or function)', 'search modules'),
    _get_operation('get_module_info', 'module_id',
                   'Get detailed information for a specific module',
                   'Module ID (e.g., M00001, M00002)', 'get module info'),
    _search_operation('search_ko_entries', 'ko', 'ko_entries',
                      'Search KEGG Orthology entries by function or gene name',
                      'Search query (function or gene name)', 'search KO entries'),
    _get_operation('get_ko_info', 'ko_id',
                   'Get detailed information for a specific KO entry',
                   'KO ID (e.g., K00001, K00002)', 'get KO info'),

    # Glycans
    _search_operation('search_glycans', 'glycan', 'glycans',
                      'Search glycan structures by name or composition',
                      'Search query (glycan name or composition)', 'search glycans'),
    _get_operation('get_glycan_info', 'glycan_id',
                   'Get detailed information for a specific glycan',
                   'Glycan ID (e.g., G00001, G00002)', 'get glycan info'),

    # BRITE hierarchies
    OperationDescriptor(
        'search_brite',
        'Search BRITE functional hierarchies',
        search_schema('Search query (function or category)', BriteSearchArgs),
        KEGGRouter.search_brite, 'search BRITE',
    ),
    OperationDescriptor(
        'get_brite_info',
        'Get detailed information for a specific BRITE entry',
        entry_schema('brite_id', 'BRITE ID (e.g., br:br08301, ko:K00001)', BriteEntryArgs),
        partial(KEGGRouter.get_formatted_entry, id_key='brite_id'), 'get BRITE info',
    ),

    # Linked entries
    _link_operation('get_pathway_compounds', 'pathway_id', 'compound', 'compound_count', 'compounds',
                    'Get all compounds involved in a specific pathway',
                    'Pathway ID (e.g., map00010, hsa00010)', 'get pathway compounds'),
    _link_operation('get_pathway_reactions', 'pathway_id', 'reaction', 'reaction_count', 'reactions',
                    'Get all reactions involved in a specific pathway',
                    'Pathway ID (e.g., map00010, rn00010)', 'get pathway reactions'),
    _link_operation('get_compound_reactions', 'compound_id', 'reaction', 'reaction_count', 'reactions',
                    'Get all reactions involving a specific compound',
                    'Compound ID (e.g., C00002, C00031)', 'get compound reactions'),
    OperationDescriptor(
        'get_gene_orthologs',
        'Find orthologous genes across organisms',
        ArgumentSchema(OrthologArgs),
        KEGGRouter.gene_orthologs, 'get gene orthologs',
    ),
    OperationDescriptor(
        'batch_entry_lookup',
        'Process multiple KEGG entries efficiently',
        ArgumentSchema(BatchArgs),
        KEGGRouter.batch_lookup, 'complete batch lookup',
    ),

    # Cross references
    OperationDescriptor(
        'convert_identifiers',
        'Convert between KEGG and external database identifiers',
        ArgumentSchema(ConversionArgs),
        KEGGRouter.convert_identifiers, 'convert identifiers',
    ),
    OperationDescriptor(
        'find_related_entries',
        'Find related entries across KEGG databases using cross-references',
        ArgumentSchema(RelatedEntriesArgs),
        KEGGRouter.find_related_entries, 'find related entries',
    ),
]

OPERATIONS: Dict[str, OperationDescriptor] = {descriptor.name: descriptor for descriptor in _CATALOGUE}
