from reels_setup.orchestrator import main

main()
