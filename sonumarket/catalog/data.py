"""Static storefront reference data.

Loaded once at import and never mutated. Prices are whole XAF.
"""
from sonumarket.catalog.models import Category, CVTemplate, Product, RedactionOption, Service

CATEGORIES = (
    Category("gaming", "PC Gaming", "Gamepad2"),
    Category("laptop", "Laptops", "Laptop"),
    Category("components", "Composants", "Cpu"),
    Category("peripherals", "Périphér.", "Keyboard"),
    Category("services", "Services", "Wrench"),
)

SERVICES = (
    Service("install", "Installation Windows + Pilotes", 60, 15000,
            "Installation propre, mises à jour et optimisation."),
    Service("assembly", "Montage PC Complet", 120, 35000,
            "Assemblage expert, cable management soigné."),
    Service("cleaning", "Nettoyage & Dépoussiérage", 45, 10000,
            "Nettoyage interne complet et changement pâte thermique."),
    Service("diag", "Diagnostic Panne", 30, 5000,
            "Identification précise du problème matériel ou logiciel."),
    Service("redaction", "Assistance Rédaction & Admin", 60, 5000,
            "Aide à la rédaction de CV, lettres ou personnalisation de contrats."),
)

CV_TEMPLATES = (
    CVTemplate("cv-modern", "Le Pro", 2000, "Modern"),
    CVTemplate("cv-classic", "L'Exécutif", 1500, "Classic"),
    CVTemplate("cv-creative", "Le Créatif", 2500, "Creative"),
)

REDACTION_OPTIONS = (
    RedactionOption("correction", "Correction & Relecture",
                    "Correction orthographe, grammaire et style.", 2000, "Check"),
    RedactionOption("letter", "Lettre Administrative",
                    "Rédaction ou mise en forme de courriers.", 3000, "FileText"),
    RedactionOption("report", "Mise en page Rapport",
                    "Word, PowerPoint. Prix par page.", 5000, "FileSpreadsheet"),
    RedactionOption("contract", "Personnalisation Contrat",
                    "Adaptation de modèles juridiques.", 10000, "Briefcase"),
)

DIGITAL_PRODUCTS = (
    Product(
        id="doc-1",
        name="Pack Contrats Commerciaux",
        price=15000,
        rating=4.8,
        category="Administratif",
        type="digital",
        file_type="docx",
        reviews=45,
        description=(
            "Un ensemble complet de modèles de contrats conformes aux normes OHADA "
            "pour sécuriser vos relations d'affaires. Idéal pour freelances et PME."
        ),
        specs={"Format": "Word (.docx)", "Pages": "12 modèles", "Langue": "Français"},
        digital_contents=(
            "Contrat de prestation de services.docx",
            "Contrat de vente de marchandises.docx",
            "Accord de confidentialité (NDA).docx",
            "Contrat de partenariat commercial.docx",
            "Lettre de mise en demeure.docx",
            "Statuts SARL simplifiés.docx",
        ),
    ),
    Product(
        id="doc-2",
        name="Modèle Business Plan Excel",
        price=10000,
        rating=4.9,
        category="Finance",
        type="digital",
        file_type="xlsx",
        reviews=120,
        description=(
            "Tableaux financiers automatisés pour construire votre prévisionnel sur 3 ans. "
            "Les formules sont déjà intégrées, il suffit de remplir vos hypothèses."
        ),
        specs={"Format": "Excel (.xlsx)", "Automatisé": "Oui", "Niveau": "Intermédiaire"},
        digital_contents=(
            "00_Guide_Utilisation.pdf",
            "01_Plan_Tresorerie_Mensuel.xlsx",
            "02_Compte_De_Resultat_Previsionnel.xlsx",
            "03_Bilan_Previsionnel.xlsx",
            "04_Tableau_Amortissements.xlsx",
            "05_Calcul_BFR.xlsx",
        ),
    ),
    Product(
        id="doc-3",
        name="Pack CV & Lettre Motivation",
        price=5000,
        rating=4.7,
        category="Carrière",
        type="digital",
        file_type="docx",
        reviews=230,
        description=(
            "Maximisez vos chances avec ces 5 designs modernes et professionnels. "
            "Faciles à modifier sur Word ou Canva."
        ),
        specs={"Format": "Word / Canva", "Design": "Moderne", "Modifiable": "100%"},
        digital_contents=(
            "CV_Design_Minimaliste.docx",
            "CV_Design_Creatif.docx",
            "CV_Design_Executif.docx",
            "Lettre_Motivation_Spontanee.docx",
            "Lettre_Motivation_Reponse_Annonce.docx",
            "Bonus_Liste_Verbes_Action.pdf",
        ),
    ),
    Product(
        id="doc-4",
        name="Guide Création Entreprise",
        price=2000,
        rating=4.5,
        category="Administratif",
        type="digital",
        file_type="pdf",
        reviews=89,
        description=(
            "Ebook complet détaillant toutes les étapes administratives et fiscales "
            "pour créer son entreprise au Cameroun et en zone CEMAC."
        ),
        specs={"Format": "PDF", "Pages": "45 pages", "Mise à jour": "2024"},
        digital_contents=(
            "Ebook_Creation_Entreprise_2025.pdf",
            "Checklist_Documents_Banque.pdf",
            "Annuaire_Centres_Impots.pdf",
        ),
    ),
)

# laptop configurator parts, hidden from the "all" listing
CONFIGURATOR_PARTS = (
    Product(
        id="cfg-chassis-14",
        name="Châssis 14\" FHD IPS",
        price=250000,
        rating=4.5,
        category="Configurateur",
        type="chassis",
        reviews=18,
        description="Châssis aluminium 14 pouces, écran Full HD IPS mat.",
        specs={"Écran": "14\" 1920x1080", "Poids": "1.4 kg"},
    ),
    Product(
        id="cfg-chassis-16",
        name="Châssis 16\" QHD 165Hz",
        price=380000,
        rating=4.7,
        category="Configurateur",
        type="chassis",
        reviews=11,
        description="Châssis 16 pouces, dalle QHD 165 Hz pour le jeu.",
        specs={"Écran": "16\" 2560x1600", "Poids": "2.2 kg"},
    ),
    Product(
        id="cfg-cpu-i5",
        name="Intel Core i5-13500H",
        price=180000,
        rating=4.6,
        category="Configurateur",
        type="cpu-mobile",
        reviews=24,
        description="12 cœurs, idéal bureautique et multitâche.",
        specs={"Cœurs": "12", "Fréquence": "4.7 GHz"},
    ),
    Product(
        id="cfg-cpu-i7",
        name="Intel Core i7-13700H",
        price=260000,
        rating=4.8,
        category="Configurateur",
        type="cpu-mobile",
        reviews=31,
        description="14 cœurs pour la création et le jeu.",
        specs={"Cœurs": "14", "Fréquence": "5.0 GHz"},
    ),
    Product(
        id="cfg-ram-16",
        name="16 Go DDR5 4800",
        price=45000,
        rating=4.7,
        category="Configurateur",
        type="ram-mobile",
        reviews=40,
        description="Deux barrettes SO-DIMM de 8 Go.",
        specs={"Capacité": "16 Go", "Type": "DDR5"},
    ),
    Product(
        id="cfg-ram-32",
        name="32 Go DDR5 5200",
        price=85000,
        rating=4.9,
        category="Configurateur",
        type="ram-mobile",
        reviews=22,
        description="Deux barrettes SO-DIMM de 16 Go.",
        specs={"Capacité": "32 Go", "Type": "DDR5"},
    ),
    Product(
        id="cfg-ssd-512",
        name="SSD NVMe 512 Go",
        price=40000,
        rating=4.6,
        category="Configurateur",
        type="storage",
        reviews=35,
        description="SSD PCIe 4.0, 5000 Mo/s en lecture.",
        specs={"Capacité": "512 Go", "Interface": "PCIe 4.0"},
    ),
    Product(
        id="cfg-ssd-1tb",
        name="SSD NVMe 1 To",
        price=70000,
        rating=4.8,
        category="Configurateur",
        type="storage",
        reviews=29,
        description="SSD PCIe 4.0, 7000 Mo/s en lecture.",
        specs={"Capacité": "1 To", "Interface": "PCIe 4.0"},
    ),
    Product(
        id="cfg-os-none",
        name="Sans système (FreeDOS)",
        price=0,
        rating=4.0,
        category="Configurateur",
        type="os",
        reviews=5,
        description="Livré sans système d'exploitation.",
        specs={"Licence": "Aucune"},
    ),
    Product(
        id="cfg-os-win11",
        name="Windows 11 Pro",
        price=95000,
        rating=4.5,
        category="Configurateur",
        type="os",
        reviews=47,
        description="Licence OEM activée et pilotes installés.",
        specs={"Licence": "OEM", "Langue": "Français"},
    ),
)

PRODUCTS = (
    Product(
        id="1",
        name="NVIDIA RTX 4080 Founders Edition",
        price=850000,
        rating=4.8,
        category="Composants",
        type="gpu",
        is_new=True,
        reviews=124,
        description=(
            "La carte graphique GeForce RTX 4080 offre les performances et les "
            "fonctionnalités ultra-recherchées par les joueurs passionnés et les créateurs."
        ),
        specs={
            "Cœurs CUDA": "9728",
            "VRAM": "16 Go GDDR6X",
            "Architecture": "Ada Lovelace",
            "Fréquence Boost": "2.51 GHz",
        },
    ),
    Product(
        id="2",
        name="MacBook Pro 14\" M3 Max",
        price=2100000,
        rating=4.9,
        category="Laptops",
        discount=10,
        reviews=89,
        description=(
            "Le MacBook Pro 14 pouces avec puce M3 Max offre des performances extrêmes "
            "pour les flux de travail les plus exigeants."
        ),
        specs={"Puce": "Apple M3 Max", "RAM": "36 Go", "SSD": "1 To", "Écran": "Liquid Retina XDR"},
    ),
    Product(
        id="3",
        name="ASUS ROG Strix G16",
        price=1250000,
        rating=4.7,
        category="Laptops",
        reviews=56,
        description="Le portable du gamer exigeant : RTX 4070, écran 240 Hz et refroidissement avancé.",
        specs={"GPU": "RTX 4070", "Écran": "16\" 240 Hz", "RAM": "16 Go"},
    ),
    Product(
        id="periph-1",
        name="Logitech MX Master 3S",
        price=65000,
        rating=4.9,
        category="Périphériques",
        type="other",
        reviews=250,
        description=(
            "La souris de productivité ultime, repensée. Clics silencieux, défilement "
            "électromagnétique MagSpeed, capteur 8K DPI fonctionnant sur le verre."
        ),
        specs={"DPI": "8000", "Connexion": "Bluetooth / Bolt", "Autonomie": "70 jours", "Recharge": "USB-C"},
    ),
    Product(
        id="periph-2",
        name="Clavier mécanique HyperX Alloy",
        price=55000,
        rating=4.6,
        category="Périphériques",
        type="other",
        reviews=73,
        description="Clavier mécanique rétroéclairé pensé pour le gamer, switchs rouges.",
        specs={"Switch": "Red", "Format": "TKL"},
    ),
) + CONFIGURATOR_PARTS + DIGITAL_PRODUCTS
