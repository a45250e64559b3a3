# chemlab/domain/syllabus.py
from typing import Dict, List, Tuple

from chemlab.domain.enums import ModuleStatus
from chemlab.domain.errors import UnknownSyllabus
from chemlab.domain.models import Module

# (id, titolo, descrizione, topic del quiz)
SYLLABUS_DETAILED: Dict[str, List[Tuple[str, str, str, str]]] = {
    "UNDERGRAD": [
        ("u1", "Structure & Bonding", "Lewis structures, hybridization, and molecular geometry.", "Chemical Bonding"),
        ("u2", "Acids and Bases", "pKa, resonance effects, and Lewis acid-base theory.", "Acids and Bases"),
        ("u3", "Alkanes & Nomenclature", "IUPAC naming, conformational analysis (Newman projections).", "Alkanes"),
        ("u4", "Stereochemistry", "Chirality, enantiomers, diastereomers, and R/S configuration.", "Stereochemistry"),
        ("u5", "Nucleophilic Substitution", "SN1 and SN2 mechanisms, kinetics, and stereochemical outcomes.",
         "Nucleophilic Substitution"),
        ("u6", "Elimination Reactions", "E1 and E2 mechanisms, Zaitsev vs Hofmann products.", "Elimination Reactions"),
        ("u7", "Alkenes: Reactions", "Electrophilic addition, hydration, and oxidation.", "Alkenes"),
        ("u8", "Alkynes", "Synthesis and reactions of alkynes.", "Alkynes"),
        ("u9", "Alcohols and Ethers", "Synthesis, oxidation, and protection groups.", "Alcohols"),
        ("u10", "Spectroscopy (NMR/IR/MS)", "Structure elucidation using spectral data.", "Spectroscopy"),
        ("u11", "Conjugated Systems", "Dienes, UV-Vis, and molecular orbital theory.", "Conjugated Systems"),
        ("u12", "Aromatic Compounds", "Benzene, aromaticity (Hückel rule).", "Aromaticity"),
        ("u13", "Electrophilic Aromatic Subst.", "Halogenation, nitration, sulfonation, Friedel-Crafts.", "EAS"),
        ("u14", "Aldehydes and Ketones", "Nucleophilic addition reactions.", "Carbonyls"),
        ("u15", "Carboxylic Acids", "Acidity, synthesis, and reactions.", "Carboxylic Acids"),
        ("u16", "Acid Derivatives", "Esters, amides, anhydrides, and acid chlorides.", "Acid Derivatives"),
        ("u17", "Enols and Enolates", "Alpha-carbon chemistry, aldol condensations.", "Enolates"),
        ("u18", "Amines", "Basicity, synthesis, and reactions.", "Amines"),
    ],
    "ALEVEL": [
        ("a1", "Atomic Structure", "Protons, neutrons, electrons, and orbitals.", "Atomic Structure"),
        ("a2", "Amount of Substance", "Moles, empirical formulas, and stoichiometry.", "Stoichiometry"),
        ("a3", "Bonding", "Ionic, covalent, metallic bonding and intermolecular forces.", "Bonding"),
        ("a4", "Intro to Organic Chem", "Functional groups, IUPAC naming, isomerism.", "Organic Basics"),
        ("a5", "Alkanes", "Fractional distillation, cracking, combustion, radical substitution.", "Alkanes"),
        ("a6", "Halogenoalkanes", "Nucleophilic substitution, elimination, ozone layer.", "Halogenoalkanes"),
        ("a7", "Alkenes", "Electrophilic addition, polymerization, stereoisomerism.", "Alkenes"),
        ("a8", "Alcohols", "Production, oxidation, elimination to alkenes.", "Alcohols"),
        ("a9", "Organic Analysis", "Mass spec (fragmentation), IR spec.", "Spectroscopy"),
        ("a10", "Thermodynamics", "Enthalpy, Born-Haber cycles, entropy, Gibbs free energy.", "Thermodynamics"),
        ("a11", "Kinetics", "Rate equations, orders of reaction, Arrhenius.", "Kinetics"),
        ("a12", "Equilibrium (Kp)", "Gas phase equilibria and equilibrium constants.", "Equilibrium"),
        ("a13", "Aldehydes & Ketones", "Carbonyl tests (Tollens/Fehlings), reduction, hydroxynitriles.", "Carbonyls"),
        ("a14", "Carboxylic Acids", "Acidity, esters, triglycerides, acylation.", "Carboxylic Acids"),
        ("a15", "Aromatic Chemistry", "Benzene structure, delocalization, electrophilic substitution.", "Aromatics"),
        ("a16", "Amines & Polymers", "Basicity, nucleophilic reactions, polyamides/polyesters.", "Amines"),
        ("a17", "Amino Acids & DNA", "Chirality, zwitterions, peptides, protein structure.", "Biochemistry"),
        ("a18", "NMR Synthesis", "Proton and C13 NMR, chromatography, organic synthesis.", "Advanced Analysis"),
    ],
    "IB": [
        ("ib1", "Stoichiometric Relationships", "The mole concept, reacting masses and volumes.", "Stoichiometry"),
        ("ib2", "Atomic Structure", "Electron configuration, emission spectra.", "Atomic Structure"),
        ("ib3", "Periodicity", "Periodic trends: radius, ionization energy, electronegativity.", "Periodicity"),
        ("ib4", "Chemical Bonding", "Ionic, covalent, metallic, VSEPR theory.", "Bonding"),
        ("ib5", "Energetics/Thermochem", "Enthalpy cycles, bond enthalpies, entropy (HL).", "Energetics"),
        ("ib6", "Chemical Kinetics", "Collision theory, rates of reaction, mechanisms (HL).", "Kinetics"),
        ("ib7", "Equilibrium", "Le Chatelier, equilibrium law, Gibb's energy (HL).", "Equilibrium"),
        ("ib8", "Acids and Bases", "pH scale, strong/weak, buffers (HL), salt hydrolysis.", "Acids and Bases"),
        ("ib9", "Redox Processes", "Oxidation states, voltaic/electrolytic cells.", "Redox"),
        ("ib10", "Organic Fundamentals", "Homologous series, functional groups, naming.", "Organic Basics"),
        ("ib11", "Measurement & Data", "Spectroscopic identification (IR, H-NMR, MS).", "Spectroscopy"),
        ("ib12", "Advanced Organic (HL)", "Sn1/Sn2, E1/E2, retro-synthesis, stereoisomerism.", "Advanced Organic"),
        ("ib13", "Biochemistry (Option)", "Proteins, lipids, carbohydrates, enzymes.", "Biochemistry"),
        ("ib14", "Medicinal Chem (Option)", "Drug action, aspirin, penicillin, opiates.", "Medicinal Chemistry"),
    ],
}

DEFAULT_SYLLABUS = "UNDERGRAD"


def syllabus_names() -> List[str]:
    return list(SYLLABUS_DETAILED)


def get_syllabus(name: str) -> Tuple[Module, ...]:
    """Moduli del catalogo: il primo attivo, tutti gli altri bloccati."""
    rows = SYLLABUS_DETAILED.get(name)
    if rows is None:
        raise UnknownSyllabus(name)
    return tuple(
        Module(
            id=mid,
            title=title,
            description=desc,
            topic=topic,
            status=ModuleStatus.ACTIVE if i == 0 else ModuleStatus.LOCKED,
        )
        for i, (mid, title, desc, topic) in enumerate(rows)
    )
