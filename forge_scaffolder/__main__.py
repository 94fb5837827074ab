from forge_scaffolder.pipeline import main

main()
